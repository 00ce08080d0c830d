"""
Physical-model formulas. Pure functions, no I/O.

Modules
-------
power_loss     Slope, altitude, rolling-resistance and slippage losses;
               net drawbar power.
minimum_power  Minimum engine power for an implement on a terrain.
"""

"""Tractor Advisor: terrain-aware tractor recommendation and power calculations."""

__version__ = "0.1.0"

"""
Physical-model outputs: power-loss breakdown and minimum required power.

All HP values are rounded to 2 decimal places; factors to 3.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from tractor_advisor.taxonomy.soil_taxonomy import SoilType


class PowerLossBreakdown(BaseModel):
    """Individual power losses in HP.

    ``total`` always sums slope, altitude, rolling resistance and slippage.
    ``temperature`` and ``transmission`` are always reported, and are added
    to ``total`` only when ``drivetrain_included`` is True.
    """

    model_config = ConfigDict(frozen=True)

    slope: float
    altitude: float
    rolling_resistance: float
    slippage: float
    temperature: float = 0.0
    transmission: float = 0.0
    drivetrain_included: bool = False
    total: float


class PowerLossResult(BaseModel):
    """Power available at the drawbar after terrain and traction losses.

    Attributes:
        engine_power_hp: Rated (gross) engine power.
        total_weight_kg: Tractor weight plus carried load.
        speed_kmh: Working speed used for the speed-dependent losses.
        rolling_coefficient: Soil rolling-resistance coefficient used.
        slippage_percent: Slippage percentage used (default or override).
        temperature_celsius: Ambient temperature used (terrain value or default).
        losses: Per-cause loss breakdown.
        net_power_hp: ``engine_power_hp - losses.total``, floored at 0.
        efficiency_percent: ``net_power_hp / engine_power_hp * 100``.
    """

    model_config = ConfigDict(frozen=True)

    engine_power_hp: float
    total_weight_kg: float
    speed_kmh: float
    rolling_coefficient: float
    slippage_percent: float
    temperature_celsius: float
    losses: PowerLossBreakdown
    net_power_hp: float
    efficiency_percent: float


class MinimumPowerFactors(BaseModel):
    """Factors behind a minimum-power figure, kept for explainability."""

    model_config = ConfigDict(frozen=True)

    base_power_hp: float
    soil_factor: float
    cone_index: float
    slope_factor: float
    depth_factor: float
    safety_margin: float


class MinimumPowerResult(BaseModel):
    """Minimum engine power needed to pull an implement on a terrain.

    Attributes:
        minimum_power_hp: Calculated power including the safety margin.
        calculated_power_hp: Calculated power before the safety margin.
        factors: Multipliers used.
        soil_type: Normalized soil the factors were looked up for.
        slope_percentage: Terrain slope used.
        working_depth_m: Working depth used (after defaulting).
        requires_four_wheel_drive: True when the slope reaches the steep
            cutoff; downstream matching then admits only 4WD/tracked tractors.
    """

    model_config = ConfigDict(frozen=True)

    minimum_power_hp: float
    calculated_power_hp: float
    factors: MinimumPowerFactors
    soil_type: SoilType
    slope_percentage: float
    working_depth_m: float
    requires_four_wheel_drive: bool

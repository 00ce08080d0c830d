"""
Power-loss model: how much engine power reaches the drawbar on a terrain.

Formulas (HP; W = total weight kg, v = speed km/h):

  slope loss        = W * v * (slope% / 100) / 273
  altitude loss     = P_engine * 0.03 * (altitude_m / 300)
  rolling coeff     = 1.2 / Cn + 0.04
  rolling loss      = W * rolling_coeff * v / 273
  slippage loss     = P_engine * slip% / 100

  temperature loss  = P_engine * ((T - 15) / 5) * 1% when T > 15 C
  transmission loss = (P_engine - altitude - temperature) * 0.13

  total loss  = slope + altitude + rolling + slippage
                (+ temperature + transmission with include_drivetrain_losses)
  net power   = max(0, P_engine - total loss)
  efficiency% = net power / P_engine * 100

273 converts kgf * km/h to HP. Every constant above is a field of
``PowerModelConfig``; callers pass an ``EngineConfig`` (``None`` = defaults).

Losses are never negative: a zero slope, altitude or weight yields exactly 0
for that term.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from tractor_advisor.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from tractor_advisor.models.machinery import Tractor
from tractor_advisor.models.power import PowerLossBreakdown, PowerLossResult
from tractor_advisor.models.terrain import Terrain
from tractor_advisor.taxonomy.machinery_taxonomy import TractionType
from tractor_advisor.taxonomy.soil_taxonomy import SOIL_PROFILES, SoilType

logger = logging.getLogger(__name__)


# ── Slope conversions ─────────────────────────────────────────────────────────


def slope_percent_to_degrees(slope_percentage: float) -> float:
    """Convert a slope grade in percent to an angle in degrees."""
    return math.degrees(math.atan(slope_percentage / 100.0))


def degrees_to_slope_percent(degrees: float) -> float:
    """Convert a slope angle in degrees to a grade in percent."""
    if not 0.0 <= degrees < 90.0:
        raise ValueError(f"degrees must be in [0, 90), got {degrees}.")
    return math.tan(math.radians(degrees)) * 100.0


# ── Individual loss terms ─────────────────────────────────────────────────────


def slope_loss_hp(
    total_weight_kg: float,
    speed_kmh: float,
    slope_percentage: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Power spent lifting the tractor and load up the slope."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).power_model
    if total_weight_kg <= 0 or speed_kmh <= 0 or slope_percentage <= 0:
        return 0.0
    return total_weight_kg * speed_kmh * (slope_percentage / 100.0) / cfg.hp_divisor


def altitude_loss_hp(
    engine_power_hp: float,
    altitude_m: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Engine power lost to thinner air (3 % per 300 m by default)."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).power_model
    if engine_power_hp <= 0 or altitude_m <= 0:
        return 0.0
    return engine_power_hp * cfg.altitude_loss_fraction * (altitude_m / cfg.altitude_step_m)


def temperature_loss_hp(
    engine_power_hp: float,
    temperature_celsius: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Engine power lost to hot intake air (1 % per 5 C above 15 C by default)."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).power_model
    excess = temperature_celsius - cfg.base_temperature_celsius
    if engine_power_hp <= 0 or excess <= 0:
        return 0.0
    return engine_power_hp * (excess / cfg.temperature_step_c) * cfg.temperature_loss_percent / 100.0


def transmission_loss_hp(
    derated_engine_hp: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Drivetrain loss, taken on engine power after altitude and temperature."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).power_model
    if derated_engine_hp <= 0:
        return 0.0
    return derated_engine_hp * cfg.transmission_loss_fraction


def cone_index(soil_type: SoilType, config: Optional[EngineConfig] = None) -> float:
    """Cone index (Cn) of a soil; ``UNKNOWN`` uses the configured default."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).power_model
    cn = SOIL_PROFILES[soil_type].cone_index
    return cfg.default_cone_index if cn is None else cn


def rolling_coefficient(soil_type: SoilType, config: Optional[EngineConfig] = None) -> float:
    """Rolling-resistance coefficient ``1.2 / Cn + 0.04`` for a soil."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).power_model
    return cfg.rolling_cn_numerator / cone_index(soil_type, config) + cfg.rolling_base_coefficient


def rolling_resistance_loss_hp(
    total_weight_kg: float,
    coefficient: float,
    speed_kmh: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Power spent overcoming rolling resistance."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).power_model
    if total_weight_kg <= 0 or speed_kmh <= 0 or coefficient <= 0:
        return 0.0
    return total_weight_kg * coefficient * speed_kmh / cfg.hp_divisor


def default_slippage_percent(
    traction_type: TractionType, config: Optional[EngineConfig] = None
) -> float:
    cfg = (config or DEFAULT_ENGINE_CONFIG).power_model
    return cfg.default_slippage_percent[traction_type]


def slippage_loss_hp(engine_power_hp: float, slippage_percent: float) -> float:
    """Power lost to wheel or track slip."""
    if engine_power_hp <= 0 or slippage_percent <= 0:
        return 0.0
    return engine_power_hp * slippage_percent / 100.0


# ── Full breakdown ────────────────────────────────────────────────────────────


def calculate_power_loss(
    tractor: Tractor,
    terrain: Terrain,
    speed_kmh: float = 6.0,
    carried_weight_kg: float = 0.0,
    slippage_percent: Optional[float] = None,
    config: Optional[EngineConfig] = None,
    include_drivetrain_losses: bool = False,
) -> PowerLossResult:
    """Compute every loss term and the net drawbar power for one tractor.

    Args:
        tractor:           Candidate tractor (engine power > 0 by construction).
            A missing ``weight_kg`` counts as 0 kg.
        terrain:           Terrain being worked.
        speed_kmh:         Working speed; must be >= 0.
        carried_weight_kg: Extra load (implement, ballast); must be >= 0.
        slippage_percent:  Override for the traction-type default, in [0, 100].
        config:            Engine parameters (``None`` = defaults).
        include_drivetrain_losses: Add the temperature and transmission
            losses to ``total`` (they are reported either way).

    Returns:
        ``PowerLossResult`` with HP values rounded to 2 decimal places.

    Raises:
        ValueError: If speed, carried weight or slippage are out of range.
    """
    if not math.isfinite(speed_kmh) or speed_kmh < 0:
        raise ValueError(f"speed_kmh must be a non-negative number, got {speed_kmh}.")
    if not math.isfinite(carried_weight_kg) or carried_weight_kg < 0:
        raise ValueError(
            f"carried_weight_kg must be a non-negative number, got {carried_weight_kg}."
        )
    if slippage_percent is not None and not 0.0 <= slippage_percent <= 100.0:
        raise ValueError(f"slippage_percent must be in [0, 100], got {slippage_percent}.")

    cfg = config or DEFAULT_ENGINE_CONFIG
    engine_hp = tractor.engine_power_hp
    total_weight = (tractor.weight_kg or 0.0) + carried_weight_kg
    coeff = rolling_coefficient(terrain.soil_type, config)
    slip = (
        slippage_percent
        if slippage_percent is not None
        else default_slippage_percent(tractor.traction_type, config)
    )

    slope = slope_loss_hp(total_weight, speed_kmh, terrain.slope_percentage, config)
    altitude = altitude_loss_hp(engine_hp, terrain.altitude_meters, config)
    rolling = rolling_resistance_loss_hp(total_weight, coeff, speed_kmh, config)
    slippage = slippage_loss_hp(engine_hp, slip)
    temperature_c = (
        terrain.temperature_celsius
        if terrain.temperature_celsius is not None
        else cfg.terrain.default_temperature_celsius
    )
    temperature = temperature_loss_hp(engine_hp, temperature_c, config)
    transmission = transmission_loss_hp(engine_hp - altitude - temperature, config)

    total = slope + altitude + rolling + slippage
    if include_drivetrain_losses:
        total += temperature + transmission

    net = max(0.0, engine_hp - total)
    if net == 0.0:
        logger.warning(
            "Losses (%.2f HP) exceed engine power (%.2f HP) for %s",
            total, engine_hp, tractor.display_name,
        )

    return PowerLossResult(
        engine_power_hp=engine_hp,
        total_weight_kg=total_weight,
        speed_kmh=speed_kmh,
        rolling_coefficient=round(coeff, 4),
        slippage_percent=slip,
        temperature_celsius=temperature_c,
        losses=PowerLossBreakdown(
            slope=round(slope, 2),
            altitude=round(altitude, 2),
            rolling_resistance=round(rolling, 2),
            slippage=round(slippage, 2),
            temperature=round(temperature, 2),
            transmission=round(transmission, 2),
            drivetrain_included=include_drivetrain_losses,
            total=round(total, 2),
        ),
        net_power_hp=round(net, 2),
        efficiency_percent=round(net / engine_hp * 100.0, 2),
    )

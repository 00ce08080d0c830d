"""
Minimum engine power needed to pull an implement on a given terrain.

  HP_min = HP_base * F_soil * F_slope * F_depth * (1 + safety_margin)

  F_soil  = soil draft factor (sandy 0.8, loam 1.0, clay 1.3, rocky 1.5,
            wet_clay 1.4, unknown 1.0)
  F_slope = 1 + (slope% / 100) * 0.5
  F_depth = working_depth_m / 0.25

Slopes at or above the steep cutoff (``TerrainConfig.steep_min_slope``) set
``requires_four_wheel_drive``; the matcher and the recommendation filter then
admit only 4WD and tracked tractors.
"""

from __future__ import annotations

import logging
from typing import Optional

from tractor_advisor.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from tractor_advisor.models.machinery import Implement
from tractor_advisor.models.power import MinimumPowerFactors, MinimumPowerResult
from tractor_advisor.models.terrain import Terrain
from tractor_advisor.physics.power_loss import cone_index
from tractor_advisor.taxonomy.soil_taxonomy import SOIL_PROFILES, SoilType

logger = logging.getLogger(__name__)


def soil_draft_factor(soil_type: SoilType) -> float:
    return SOIL_PROFILES[soil_type].draft_factor


def slope_factor(slope_percentage: float, config: Optional[EngineConfig] = None) -> float:
    """Multiplier that grows linearly with slope; 1.0 on flat ground."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).minimum_power
    return 1.0 + (max(0.0, slope_percentage) / 100.0) * cfg.slope_factor_coefficient


def depth_factor(working_depth_m: float, config: Optional[EngineConfig] = None) -> float:
    """Working depth relative to the standard reference depth."""
    cfg = (config or DEFAULT_ENGINE_CONFIG).minimum_power
    return working_depth_m / cfg.standard_depth_m


def calculate_minimum_power(
    implement: Implement,
    terrain: Terrain,
    config: Optional[EngineConfig] = None,
) -> MinimumPowerResult:
    """Compute the minimum engine power for ``implement`` on ``terrain``.

    A missing working depth falls back to the standard depth (factor 1.0);
    an unrecognized soil uses the ``UNKNOWN`` table arm. Neither raises.
    """
    cfg = config or DEFAULT_ENGINE_CONFIG

    base = implement.power_requirement_hp
    depth = implement.working_depth_m or cfg.minimum_power.standard_depth_m
    f_soil = soil_draft_factor(terrain.soil_type)
    f_slope = slope_factor(terrain.slope_percentage, cfg)
    f_depth = depth_factor(depth, cfg)
    margin = cfg.minimum_power.safety_margin

    calculated = base * f_soil * f_slope * f_depth
    minimum = calculated * (1.0 + margin)
    requires_4wd = terrain.slope_percentage >= cfg.terrain.steep_min_slope

    logger.debug(
        "Minimum power for %s on %s: %.2f HP (soil=%.2f slope=%.3f depth=%.3f)",
        implement.name or "implement", terrain.display_name, minimum, f_soil, f_slope, f_depth,
    )

    return MinimumPowerResult(
        minimum_power_hp=round(minimum, 2),
        calculated_power_hp=round(calculated, 2),
        factors=MinimumPowerFactors(
            base_power_hp=base,
            soil_factor=round(f_soil, 3),
            cone_index=cone_index(terrain.soil_type, cfg),
            slope_factor=round(f_slope, 3),
            depth_factor=round(f_depth, 3),
            safety_margin=margin,
        ),
        soil_type=terrain.soil_type,
        slope_percentage=terrain.slope_percentage,
        working_depth_m=depth,
        requires_four_wheel_drive=requires_4wd,
    )

"""
Terrain analyzer: qualitative bands, metrics and requirement factors.

``analyze_terrain`` is pure and total. Every ``Terrain`` maps to exactly one
``TerrainAnalysis``; defaults (unknown soil, missing temperature) are applied
here and nothing is rejected. Input validation belongs to the model layer and
the recommendation generator.

Slope bands (``TerrainConfig``):
  FLAT      slope <  5 %
  MODERATE  5 % <= slope < 15 %
  STEEP     slope >= 15 %   (same cutoff as minimum-power 4WD requirement)

Altitude bands:
  LOWLAND   < 1000 m
  MIDLAND   1000 m to < 2500 m
  HIGHLAND  >= 2500 m

Combined difficulty = min(100, 0.6 * soil_difficulty + 0.4 * 2 * slope%).
"""

from __future__ import annotations

import logging
from typing import Optional

from tractor_advisor.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from tractor_advisor.models.terrain import (
    Terrain,
    TerrainAnalysis,
    TerrainClassification,
    TerrainMetrics,
    TerrainRequirements,
)
from tractor_advisor.physics.minimum_power import slope_factor, soil_draft_factor
from tractor_advisor.physics.power_loss import (
    cone_index,
    rolling_coefficient,
    slope_percent_to_degrees,
)
from tractor_advisor.taxonomy.soil_taxonomy import (
    SOIL_PROFILES,
    AltitudeBand,
    SlopeClass,
    SoilType,
)

logger = logging.getLogger(__name__)

SLOPE_DESCRIPTIONS: dict[SlopeClass, str] = {
    SlopeClass.FLAT:     "Flat terrain",
    SlopeClass.MODERATE: "Moderate slope",
    SlopeClass.STEEP:    "Steep slope",
}

_SOIL_WEIGHT = 0.6
_SLOPE_WEIGHT = 0.4
_SLOPE_SCALE = 2.0


def classify_slope(slope_percentage: float, config: Optional[EngineConfig] = None) -> SlopeClass:
    cfg = (config or DEFAULT_ENGINE_CONFIG).terrain
    if slope_percentage < cfg.flat_max_slope:
        return SlopeClass.FLAT
    if slope_percentage < cfg.steep_min_slope:
        return SlopeClass.MODERATE
    return SlopeClass.STEEP


def classify_altitude(altitude_meters: float, config: Optional[EngineConfig] = None) -> AltitudeBand:
    cfg = (config or DEFAULT_ENGINE_CONFIG).terrain
    if altitude_meters < cfg.lowland_max_altitude:
        return AltitudeBand.LOWLAND
    if altitude_meters < cfg.highland_min_altitude:
        return AltitudeBand.MIDLAND
    return AltitudeBand.HIGHLAND


def combined_difficulty(soil_difficulty: float, slope_percentage: float) -> float:
    """Blend soil and slope difficulty into one 0–100 figure."""
    raw = _SOIL_WEIGHT * soil_difficulty + _SLOPE_WEIGHT * slope_percentage * _SLOPE_SCALE
    return min(100.0, raw)


def requires_tracks(soil_type: SoilType, slope_class: SlopeClass) -> bool:
    if soil_type == SoilType.WET_CLAY:
        return True
    return soil_type == SoilType.CLAY and slope_class == SlopeClass.STEEP


def analyze_terrain(terrain: Terrain, config: Optional[EngineConfig] = None) -> TerrainAnalysis:
    """Classify ``terrain`` and derive the factors reused by scoring.

    Args:
        terrain: Terrain record.
        config:  Engine parameters (``None`` = defaults).

    Returns:
        Frozen ``TerrainAnalysis``.
    """
    cfg = config or DEFAULT_ENGINE_CONFIG

    profile = SOIL_PROFILES[terrain.soil_type]
    slope = terrain.slope_percentage
    slope_class = classify_slope(slope, cfg)
    temperature = (
        terrain.temperature_celsius
        if terrain.temperature_celsius is not None
        else cfg.terrain.default_temperature_celsius
    )
    altitude_derate = (
        cfg.power_model.altitude_loss_fraction
        * (terrain.altitude_meters / cfg.power_model.altitude_step_m)
        * 100.0
    )

    analysis = TerrainAnalysis(
        classification=TerrainClassification(
            slope_class=slope_class,
            slope_description=SLOPE_DESCRIPTIONS[slope_class],
            soil_type=terrain.soil_type,
            soil_label=profile.label,
            preferred_gear=profile.preferred_gear,
            altitude_band=classify_altitude(terrain.altitude_meters, cfg),
        ),
        metrics=TerrainMetrics(
            slope_percentage=slope,
            slope_degrees=round(slope_percent_to_degrees(slope), 2),
            altitude_meters=terrain.altitude_meters,
            temperature_celsius=temperature,
            cone_index=cone_index(terrain.soil_type, cfg),
            rolling_coefficient=round(rolling_coefficient(terrain.soil_type, cfg), 4),
            soil_difficulty=profile.difficulty,
            combined_difficulty=round(combined_difficulty(profile.difficulty, slope), 2),
        ),
        requirements=TerrainRequirements(
            soil_factor=soil_draft_factor(terrain.soil_type),
            slope_factor=round(slope_factor(slope, cfg), 3),
            altitude_derate_percent=round(altitude_derate, 2),
            requires_four_wheel_drive=slope_class == SlopeClass.STEEP,
            requires_tracks=requires_tracks(terrain.soil_type, slope_class),
        ),
    )
    logger.debug(
        "Analyzed %s: slope=%s soil=%s altitude=%s",
        terrain.display_name,
        slope_class,
        terrain.soil_type,
        analysis.classification.altitude_band,
    )
    return analysis

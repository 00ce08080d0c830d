"""
Tractor scoring: weighs one candidate tractor against an implement's power
requirement and a terrain.

Score formula (sum of five clamped components, range 0–100)
-----------------------------------------------------------
    total = efficiency (30) + traction (25) + soil (20)
          + economic (15) + availability (10)

Each component is clamped to [0, weight] and rounded to 2 decimal places;
``total`` is the sum of the rounded components, so the breakdown always adds
up to the total exactly.

Component explanations
----------------------
efficiency (max 30):
    Power multiple m = tractor_hp / required_hp.
    1.00 <= m <= 1.25 → full weight (tight sizing).
    m < 1.00          → weight − 2.0 * weight * (1.00 − m)   (undersized)
    m > 1.25          → weight − 0.8 * weight * (m − 1.25)   (oversized)
    1.5x → 24.0, 4x → 0.0.

traction (max 25):
    Base by drive train: 4wd 18, tracked 18, 2wd 12.
    Slope adjustment:   MODERATE 4wd +4, tracked +5, 2wd −2
                        STEEP    4wd +7, tracked +7, 2wd −12

soil (max 20):
    Preferred gear TRACK + tracked tractor       → weight
    Soft soil (Cn <= 30) + tracked tractor       → weight
    Preferred gear REINFORCED + reinforced tires → 0.9 * weight
    Preferred gear STANDARD + wheeled tractor    → 0.8 * weight
    otherwise                                    → weight / 2
    Soil difficulty > 70 and not tracked         → × 0.7
    Soft soil (Cn <= 30) and weight >= 5000 kg   → + 0.1 * weight

economic (max 15):
    With fuel data: (1 − (lph − 5) / 20) * weight.
    Without:        required_hp / tractor_hp * weight (surplus power costs).

availability (max 10):
    available → 10, in_use → 5, anything else → 0. Exact table lookup.
"""

from __future__ import annotations

import math
from typing import Optional

from tractor_advisor.config import DEFAULT_ENGINE_CONFIG, EngineConfig, ScoringConfig
from tractor_advisor.models.machinery import Implement, Tractor
from tractor_advisor.models.recommendation import ScoreBreakdown, TractorScore
from tractor_advisor.models.terrain import Terrain, TerrainAnalysis
from tractor_advisor.taxonomy.machinery_taxonomy import TractionType
from tractor_advisor.taxonomy.soil_taxonomy import RunningGear, SlopeClass
from tractor_advisor.terrain.analyzer import analyze_terrain

MAX_SCORE = 100.0

_REINFORCED_TIRE_MARKERS = ("reinforced", "reforzad")


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


# ── Components ────────────────────────────────────────────────────────────────


def efficiency_score(tractor_hp: float, required_hp: float, cfg: ScoringConfig) -> float:
    weight = cfg.weights.efficiency
    multiple = tractor_hp / required_hp
    if multiple < cfg.optimal_band_min:
        score = weight - cfg.undersize_penalty_rate * weight * (cfg.optimal_band_min - multiple)
    elif multiple <= cfg.optimal_band_max:
        score = weight
    else:
        score = weight - cfg.oversize_penalty_rate * weight * (multiple - cfg.optimal_band_max)
    return _clamp(score, 0.0, weight)


def traction_score(
    traction_type: TractionType, slope_class: SlopeClass, cfg: ScoringConfig
) -> float:
    score = cfg.traction_base[traction_type]
    if slope_class == SlopeClass.MODERATE:
        score += cfg.moderate_slope_bonus[traction_type]
    elif slope_class == SlopeClass.STEEP:
        score += cfg.steep_slope_bonus[traction_type]
    return _clamp(score, 0.0, cfg.weights.traction)


def _has_reinforced_tires(tire_type: Optional[str]) -> bool:
    if not tire_type:
        return False
    label = tire_type.lower()
    return any(marker in label for marker in _REINFORCED_TIRE_MARKERS)


def soil_score(tractor: Tractor, analysis: TerrainAnalysis, cfg: ScoringConfig) -> float:
    weight = cfg.weights.soil
    gear = analysis.classification.preferred_gear
    tracked = tractor.traction_type == TractionType.TRACKED
    soft = analysis.metrics.cone_index <= cfg.soft_soil_max_cone_index

    # Tracks float on soft ground whatever gear the soil table prefers.
    if tracked and (gear == RunningGear.TRACK or soft):
        score = weight
    elif gear == RunningGear.REINFORCED and _has_reinforced_tires(tractor.tire_type):
        score = weight * 0.9
    elif gear == RunningGear.STANDARD and not tracked:
        score = weight * 0.8
    else:
        score = weight / 2.0

    if analysis.metrics.soil_difficulty > cfg.difficult_soil_threshold and not tracked:
        score *= cfg.difficult_soil_multiplier

    # Heavy machines hold traction on soft ground.
    if soft and (tractor.weight_kg or 0.0) >= cfg.heavy_tractor_kg:
        score += weight * cfg.heavy_tractor_bonus

    return _clamp(score, 0.0, weight)


def economic_score(tractor: Tractor, required_hp: float, cfg: ScoringConfig) -> float:
    weight = cfg.weights.economic
    if tractor.fuel_consumption_lph is not None:
        score = (1.0 - (tractor.fuel_consumption_lph - cfg.fuel_reference_lph) / cfg.fuel_range_lph) * weight
    else:
        score = required_hp / tractor.engine_power_hp * weight
    return _clamp(score, 0.0, weight)


def availability_score(tractor: Tractor, cfg: ScoringConfig) -> float:
    fraction = cfg.availability_fractions.get(tractor.status, 0.0)
    return _clamp(fraction * cfg.weights.availability, 0.0, cfg.weights.availability)


# ── Entry point ───────────────────────────────────────────────────────────────


def calculate_score(
    tractor: Tractor,
    implement: Optional[Implement],
    terrain: Terrain,
    required_power_hp: float,
    config: Optional[EngineConfig] = None,
    analysis: Optional[TerrainAnalysis] = None,
) -> TractorScore:
    """Score one candidate tractor.

    Args:
        tractor:           Candidate tractor.
        implement:         Implement being pulled. Its requirement is already
                           folded into ``required_power_hp``; kept so callers
                           score with the full context.
        terrain:           Terrain being worked.
        required_power_hp: Power the job needs; positive and finite.
        config:            Engine parameters (``None`` = defaults).
        analysis:          Precomputed analysis of ``terrain``; computed here
                           when omitted.

    Returns:
        ``TractorScore`` whose breakdown sums to ``total``.

    Raises:
        ValueError: If ``required_power_hp`` is not a positive finite number.
    """
    if not math.isfinite(required_power_hp) or required_power_hp <= 0:
        raise ValueError(f"required_power_hp must be a positive number, got {required_power_hp}.")

    cfg = config or DEFAULT_ENGINE_CONFIG
    scoring = cfg.scoring
    if analysis is None:
        analysis = analyze_terrain(terrain, cfg)

    breakdown = ScoreBreakdown(
        efficiency=round(efficiency_score(tractor.engine_power_hp, required_power_hp, scoring), 2),
        traction=round(traction_score(tractor.traction_type, analysis.slope_class, scoring), 2),
        soil=round(soil_score(tractor, analysis, scoring), 2),
        economic=round(economic_score(tractor, required_power_hp, scoring), 2),
        availability=round(availability_score(tractor, scoring), 2),
    )
    total = round(breakdown.component_sum(), 2)

    return TractorScore(
        total=total,
        breakdown=breakdown,
        max_possible=MAX_SCORE,
        percentage_score=round(total / MAX_SCORE * 100.0, 2),
    )

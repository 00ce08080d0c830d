"""
Recommendation generator: filters, scores, ranks and classifies tractors for
one terrain and power requirement.

Usage flow
----------
1. analyze_terrain(terrain)                      -> TerrainAnalysis (once)
2. filter_compatible_tractors(tractors, ...)     -> hard-filtered candidates
3. calculate_score(tractor, ...)                 -> TractorScore per candidate
4. stable sort by score.total desc, truncate to options.limit, rank 1..N
5. attach compatibility, fit classification and explanation
6. build summary -> RecommendationResult

Hard filters
------------
- engine_power_hp < required power            → excluded (never just penalized)
- STEEP terrain and not 4WD / tracked         → excluded
- options.available_only and status != available → excluded

"No compatible tractor" is reported as data (``success=False`` with a
``summary.reason``); only malformed input raises.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from pydantic import ValidationError

from tractor_advisor.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from tractor_advisor.models.machinery import Implement, Tractor
from tractor_advisor.models.recommendation import (
    Compatibility,
    RecommendationEntry,
    RecommendationOptions,
    RecommendationResult,
    RecommendationSummary,
    TractorScore,
)
from tractor_advisor.models.terrain import Terrain, TerrainAnalysis
from tractor_advisor.recommendations.classification import (
    GOOD,
    OPTIMAL,
    classify_utilization,
    fit_bands,
    utilization_percent,
)
from tractor_advisor.recommendations.scorer import calculate_score
from tractor_advisor.taxonomy.machinery_taxonomy import HIGH_TRACTION_TYPES, TractorStatus
from tractor_advisor.terrain.analyzer import analyze_terrain

logger = logging.getLogger(__name__)

TERRAIN_REQUIRED = "terrain es requerido"
TRACTORS_NOT_ARRAY = "tractors debe ser un array"
REQUIRED_POWER_INVALID = "requiredPower debe ser un número positivo"

_COMPONENT_REASONS: dict[str, str] = {
    "efficiency":   "High power efficiency ({utilization}% utilization)",
    "traction":     "Best traction for {terrain}",
    "soil":         "Well suited to the soil type",
    "economic":     "Best cost/benefit ratio",
    "availability": "Available immediately",
}

_FIT_REASONS: dict[str, str] = {
    OPTIMAL: "Optimal power match",
    GOOD:    "Good balance between power and requirement",
}


class RecommendationInputError(ValueError):
    """Raised when ``generate_recommendation`` receives malformed input."""


# ── Input coercion ────────────────────────────────────────────────────────────


def _coerce_terrain(terrain: Any) -> Terrain:
    if isinstance(terrain, Terrain):
        return terrain
    return Terrain.model_validate(terrain)


def _coerce_implement(implement: Any) -> Optional[Implement]:
    if implement is None or isinstance(implement, Implement):
        return implement
    return Implement.model_validate(implement)


def _coerce_tractors(tractors: Sequence[Any]) -> list[Tractor]:
    coerced: list[Tractor] = []
    errors: list[str] = []
    for i, item in enumerate(tractors):
        try:
            coerced.append(item if isinstance(item, Tractor) else Tractor.model_validate(item))
        except ValidationError as exc:
            errors.append(f"tractors[{i}]: {exc.errors()[0]['msg']}")
    if errors:
        raise RecommendationInputError(
            f"{len(errors)} invalid tractor(s):\n" + "\n".join(errors[:10])
        )
    return coerced


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


# ── Filtering ─────────────────────────────────────────────────────────────────


def filter_compatible_tractors(
    tractors: Sequence[Tractor],
    required_power: float,
    analysis: TerrainAnalysis,
    available_only: bool = False,
) -> list[Tractor]:
    """Apply the hard compatibility filters, preserving input order."""
    compatible: list[Tractor] = []
    for tractor in tractors:
        if tractor.engine_power_hp < required_power:
            continue
        if analysis.is_steep and tractor.traction_type not in HIGH_TRACTION_TYPES:
            continue
        if available_only and tractor.status != TractorStatus.AVAILABLE:
            continue
        compatible.append(tractor)
    return compatible


def _no_match_reason(analysis: TerrainAnalysis, available_only: bool) -> str:
    if analysis.is_steep:
        reason = "No 4WD or tracked tractors with sufficient power for steep terrain"
    else:
        reason = "No tractors with sufficient power"
    if available_only:
        reason += " among available tractors"
    return reason


# ── Explanations ──────────────────────────────────────────────────────────────


def build_explanation(
    score: TractorScore,
    compatibility: Compatibility,
    fit_label: str,
    analysis: TerrainAnalysis,
) -> str:
    """Explain a recommendation by its strongest component and fit band.

    Ties between components resolve to the first in breakdown order.
    """
    breakdown = score.breakdown.model_dump()
    strongest = max(breakdown, key=lambda name: breakdown[name])
    reasons = [
        _COMPONENT_REASONS[strongest].format(
            utilization=f"{compatibility.utilization_percent:g}",
            terrain="steep slopes" if analysis.is_steep else "this terrain",
        )
    ]
    if fit_label in _FIT_REASONS:
        reasons.append(_FIT_REASONS[fit_label])
    return ". ".join(reasons) + "."


# ── Entry point ───────────────────────────────────────────────────────────────


def generate_recommendation(
    terrain: Any = None,
    implement: Any = None,
    tractors: Any = None,
    required_power: Any = None,
    options: Any = None,
    config: Optional[EngineConfig] = None,
) -> RecommendationResult:
    """Rank the tractors that can do the job on ``terrain``.

    Args:
        terrain:        ``Terrain`` or a mapping of its fields. Required.
        implement:      ``Implement``, a mapping, or ``None``.
        tractors:       List or tuple of ``Tractor`` records or mappings.
        required_power: Power the job needs in HP; positive and finite.
        options:        ``RecommendationOptions``, a mapping, or ``None``.
        config:         Engine parameters (``None`` = defaults).

    Returns:
        ``RecommendationResult``; ``success`` is False when no tractor
        survives the hard filters.

    Raises:
        RecommendationInputError: terrain is None, tractors not a list, or
            required_power not a positive number. Checked in that order,
            before any computation.
        pydantic.ValidationError: A terrain/implement/options mapping is
            malformed.
    """
    if terrain is None:
        raise RecommendationInputError(TERRAIN_REQUIRED)
    if not isinstance(tractors, (list, tuple)):
        raise RecommendationInputError(TRACTORS_NOT_ARRAY)
    if not _is_positive_number(required_power):
        raise RecommendationInputError(REQUIRED_POWER_INVALID)

    cfg = config or DEFAULT_ENGINE_CONFIG
    terrain_model = _coerce_terrain(terrain)
    implement_model = _coerce_implement(implement)
    candidates = _coerce_tractors(tractors)
    if options is None:
        opts = RecommendationOptions()
    elif isinstance(options, RecommendationOptions):
        opts = options
    else:
        opts = RecommendationOptions.model_validate(options)
    required = float(required_power)

    # Step 1: terrain analysis, shared by every candidate
    analysis = analyze_terrain(terrain_model, cfg)

    # Step 2: hard filters
    compatible = filter_compatible_tractors(
        candidates, required, analysis, available_only=opts.available_only
    )
    total_evaluated = len(candidates)

    if not compatible:
        reason = _no_match_reason(analysis, opts.available_only)
        logger.info(
            "No compatible tractors for %s (%d evaluated, %.2f HP required)",
            terrain_model.display_name, total_evaluated, required,
        )
        return RecommendationResult(
            success=False,
            recommendations=[],
            terrain_analysis=analysis,
            summary=RecommendationSummary(
                total_evaluated=total_evaluated,
                compatible_count=0,
                filtered_out=total_evaluated,
                reason=reason,
            ),
        )

    # Step 3: score; Step 4: stable sort, highest total first
    scored = [
        (tractor, calculate_score(tractor, implement_model, terrain_model, required, cfg, analysis))
        for tractor in compatible
    ]
    scored.sort(key=lambda pair: pair[1].total, reverse=True)
    if opts.limit is not None:
        scored = scored[: opts.limit]

    # Step 5: rank and classify
    bands = fit_bands(cfg)
    recommendations: list[RecommendationEntry] = []
    for rank, (tractor, score) in enumerate(scored, start=1):
        compatibility = Compatibility(
            required_power=round(required, 2),
            tractor_power=tractor.engine_power_hp,
            surplus_hp=round(tractor.engine_power_hp - required, 2),
            utilization_percent=round(utilization_percent(required, tractor.engine_power_hp), 2),
        )
        classification = classify_utilization(compatibility.utilization_percent, bands)
        recommendations.append(
            RecommendationEntry(
                rank=rank,
                tractor=tractor,
                score=score,
                compatibility=compatibility,
                classification=classification,
                explanation=build_explanation(score, compatibility, classification.label, analysis),
            )
        )

    top = recommendations[0]
    logger.info(
        "Recommended %d of %d compatible tractors for %s (top: %s, %.2f)",
        len(recommendations), len(compatible), terrain_model.display_name,
        top.tractor.display_name, top.score.total,
    )

    return RecommendationResult(
        success=True,
        recommendations=recommendations,
        terrain_analysis=analysis,
        summary=RecommendationSummary(
            total_evaluated=total_evaluated,
            compatible_count=len(compatible),
            filtered_out=total_evaluated - len(compatible),
            top_score=top.score.total,
            top_tractor=top.tractor,
        ),
    )

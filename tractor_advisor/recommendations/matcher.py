"""
Minimum-power matcher: computes the power an implement needs on a terrain
and sorts the available fleet into suitability bands.

Only tractors with status ``available`` are considered. On terrain steep
enough to require four-wheel drive, 2WD tractors are set aside before
classification. The remaining tractors are classified with the suitability
bands from ``classification.suitability_bands``::

    INSUFFICIENT  tractor_hp <  required_hp
    OPTIMAL       tractor_hp <= 1.25 * required_hp
    OVERPOWERED   otherwise

The top list holds OPTIMAL tractors first, then OVERPOWERED ones, each group
ordered by utilization descending (stable), truncated to ``MatcherConfig.top_n``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from tractor_advisor.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from tractor_advisor.models.machinery import Implement, Tractor
from tractor_advisor.models.recommendation import MinimumPowerMatch, SuitabilityEntry
from tractor_advisor.models.terrain import Terrain
from tractor_advisor.physics.minimum_power import calculate_minimum_power
from tractor_advisor.recommendations.classification import (
    INSUFFICIENT,
    OPTIMAL,
    OVERPOWERED,
    classify_utilization,
    suitability_bands,
    utilization_percent,
)
from tractor_advisor.taxonomy.machinery_taxonomy import HIGH_TRACTION_TYPES, TractorStatus

logger = logging.getLogger(__name__)


def classify_suitability(
    tractor: Tractor, required_hp: float, config: Optional[EngineConfig] = None
) -> SuitabilityEntry:
    """Classify one tractor against a required power (unranked)."""
    utilization = utilization_percent(required_hp, tractor.engine_power_hp)
    classification = classify_utilization(utilization, suitability_bands(config))
    return SuitabilityEntry(
        tractor=tractor,
        utilization_percent=round(utilization, 2),
        surplus_hp=round(tractor.engine_power_hp - required_hp, 2),
        classification=classification,
        is_compatible=classification.label != INSUFFICIENT,
    )


def match_minimum_power(
    implement: Implement,
    terrain: Terrain,
    tractors: Sequence[Tractor],
    config: Optional[EngineConfig] = None,
    working_depth_m: Optional[float] = None,
) -> MinimumPowerMatch:
    """Compute the minimum power and pick the best-sized available tractors.

    Args:
        implement:       Implement to pull.
        terrain:         Terrain being worked.
        tractors:        Fleet to classify.
        config:          Engine parameters (``None`` = defaults).
        working_depth_m: Optional override of the implement's working depth.

    Returns:
        ``MinimumPowerMatch`` with per-band counts and the ranked top list.

    Raises:
        ValueError: If ``working_depth_m`` is given and not positive.
    """
    cfg = config or DEFAULT_ENGINE_CONFIG

    if working_depth_m is not None:
        if working_depth_m <= 0:
            raise ValueError(f"working_depth_m must be > 0, got {working_depth_m}.")
        implement = implement.model_copy(update={"working_depth_m": working_depth_m})

    requirement = calculate_minimum_power(implement, terrain, cfg)
    required_hp = requirement.minimum_power_hp

    available = [t for t in tractors if t.status == TractorStatus.AVAILABLE]
    if requirement.requires_four_wheel_drive:
        eligible = [t for t in available if t.traction_type in HIGH_TRACTION_TYPES]
    else:
        eligible = available
    classified = [classify_suitability(t, required_hp, cfg) for t in eligible]

    by_label: dict[str, list[SuitabilityEntry]] = {INSUFFICIENT: [], OPTIMAL: [], OVERPOWERED: []}
    for entry in classified:
        by_label[entry.classification.label].append(entry)

    ordered = [
        *sorted(by_label[OPTIMAL], key=lambda e: e.utilization_percent, reverse=True),
        *sorted(by_label[OVERPOWERED], key=lambda e: e.utilization_percent, reverse=True),
    ][: cfg.matcher.top_n]
    top = [entry.model_copy(update={"rank": rank}) for rank, entry in enumerate(ordered, start=1)]

    logger.info(
        "Minimum power %.2f HP: %d optimal, %d overpowered, %d insufficient of %d available",
        required_hp, len(by_label[OPTIMAL]), len(by_label[OVERPOWERED]),
        len(by_label[INSUFFICIENT]), len(available),
    )

    return MinimumPowerMatch(
        power_requirement=requirement,
        total_evaluated=len(available),
        optimal_count=len(by_label[OPTIMAL]),
        overpowered_count=len(by_label[OVERPOWERED]),
        insufficient_count=len(by_label[INSUFFICIENT]),
        traction_excluded_count=len(available) - len(eligible),
        recommendations=top,
    )

"""
Recommendation output models.

``TractorScore`` is the per-candidate weighted score. ``RecommendationResult``
is the envelope returned by ``generate_recommendation``; ``MinimumPowerMatch``
is the envelope returned by ``match_minimum_power``.

All models are frozen: a result is built once per call, ranks and ordering
fixed at construction, and never mutated afterwards. ``to_dict()`` returns
plain JSON-ready data for the calling layer.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tractor_advisor.models.machinery import Tractor
from tractor_advisor.models.power import MinimumPowerResult
from tractor_advisor.models.terrain import TerrainAnalysis

SCORE_SUM_TOLERANCE = 0.01


class ScoreBreakdown(BaseModel):
    """Per-criterion score contributions (all non-negative)."""

    model_config = ConfigDict(frozen=True)

    efficiency: float = Field(ge=0.0)
    traction: float = Field(ge=0.0)
    soil: float = Field(ge=0.0)
    economic: float = Field(ge=0.0)
    availability: float = Field(ge=0.0)

    def component_sum(self) -> float:
        return self.efficiency + self.traction + self.soil + self.economic + self.availability


class TractorScore(BaseModel):
    """Weighted multi-criteria score for one candidate tractor.

    Attributes:
        total: Sum of the breakdown, in [0, 100].
        breakdown: Per-criterion contributions.
        max_possible: Always 100.
        percentage_score: ``total / max_possible * 100``.
    """

    model_config = ConfigDict(frozen=True)

    total: float
    breakdown: ScoreBreakdown
    max_possible: float = 100.0
    percentage_score: float

    @model_validator(mode="after")
    def validate_total(self) -> "TractorScore":
        if not 0.0 <= self.total <= self.max_possible:
            raise ValueError(f"total must be in [0, {self.max_possible}], got {self.total}.")
        if abs(self.breakdown.component_sum() - self.total) > SCORE_SUM_TOLERANCE:
            raise ValueError(
                f"breakdown sums to {self.breakdown.component_sum():.4f} but total is {self.total}."
            )
        return self


class Compatibility(BaseModel):
    """Power fit of a tractor against the required power."""

    model_config = ConfigDict(frozen=True)

    required_power: float
    tractor_power: float
    surplus_hp: float
    utilization_percent: float


class Classification(BaseModel):
    """A labelled utilization band."""

    model_config = ConfigDict(frozen=True)

    label: str
    description: str


class RecommendationOptions(BaseModel):
    """Caller options for ``generate_recommendation``.

    Attributes:
        limit: Maximum number of recommendations; ``None`` keeps every
            compatible candidate.
        available_only: When True, tractors whose status is not
            ``available`` are filtered out before scoring.
    """

    model_config = ConfigDict(frozen=True)

    limit: Optional[int] = Field(default=None, ge=1)
    available_only: bool = False


class RecommendationEntry(BaseModel):
    """One ranked recommendation.

    ``explanation`` is a short human-readable sentence naming the strongest
    score component and the fit band.
    """

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    tractor: Tractor
    score: TractorScore
    compatibility: Compatibility
    classification: Classification
    explanation: str = ""


class RecommendationSummary(BaseModel):
    """Aggregate statistics for one recommendation run.

    ``reason`` is set only when no candidate survived the hard filters.
    """

    model_config = ConfigDict(frozen=True)

    total_evaluated: int
    compatible_count: int
    filtered_out: int
    top_score: Optional[float] = None
    top_tractor: Optional[Tractor] = None
    reason: Optional[str] = None


class RecommendationResult(BaseModel):
    """Envelope returned by ``generate_recommendation``."""

    model_config = ConfigDict(frozen=True)

    success: bool
    recommendations: list[RecommendationEntry]
    terrain_analysis: TerrainAnalysis
    summary: RecommendationSummary

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class SuitabilityEntry(BaseModel):
    """A tractor classified against a minimum-power requirement.

    ``rank`` is ``None`` for tractors that were classified but not kept in
    the top list (e.g. INSUFFICIENT ones).
    """

    model_config = ConfigDict(frozen=True)

    rank: Optional[int] = None
    tractor: Tractor
    utilization_percent: float
    surplus_hp: float
    classification: Classification
    is_compatible: bool


class MinimumPowerMatch(BaseModel):
    """Envelope returned by ``match_minimum_power``.

    Counts cover available tractors only. ``traction_excluded_count`` counts
    2WD tractors set aside because the slope requires four-wheel drive.
    """

    model_config = ConfigDict(frozen=True)

    power_requirement: MinimumPowerResult
    total_evaluated: int
    optimal_count: int
    overpowered_count: int
    insufficient_count: int
    traction_excluded_count: int = 0
    recommendations: list[SuitabilityEntry]

    @property
    def best_match(self) -> Optional[SuitabilityEntry]:
        return self.recommendations[0] if self.recommendations else None

    def to_dict(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json")
        best = self.best_match
        payload["best_match"] = best.model_dump(mode="json") if best else None
        return payload

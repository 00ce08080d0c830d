"""
Utilization classification shared by the recommendation generator and the
minimum-power matcher.

Utilization percent = required_hp / tractor_hp * 100. One classifier,
``classify_utilization``, walks an ordered band list and returns the first
band whose lower bound the value clears. Two band sets are built from
``ClassificationConfig``:

Fit bands (recommendations)::

    OPTIMAL      >= 85 %
    GOOD         >= 70 %
    OVERPOWERED  >= 50 %
    EXCESSIVE    otherwise

Suitability bands (minimum-power matcher)::

    INSUFFICIENT > 100 %           tractor below the requirement
    OPTIMAL      >= 80 %           tractor up to 1.25x the requirement
    OVERPOWERED  otherwise
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tractor_advisor.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from tractor_advisor.models.recommendation import Classification

INSUFFICIENT = "INSUFFICIENT"
OPTIMAL = "OPTIMAL"
GOOD = "GOOD"
OVERPOWERED = "OVERPOWERED"
EXCESSIVE = "EXCESSIVE"


@dataclass(frozen=True)
class Band:
    """One utilization band.

    Attributes:
        label:           Band tag.
        description:     Human-readable explanation.
        lower:           Lower bound on utilization percent; ``None`` is the
                         catch-all last band.
        lower_inclusive: Whether ``lower`` itself belongs to this band.
    """

    label: str
    description: str
    lower: Optional[float] = None
    lower_inclusive: bool = True

    def contains(self, utilization_percent: float) -> bool:
        if self.lower is None:
            return True
        if self.lower_inclusive:
            return utilization_percent >= self.lower
        return utilization_percent > self.lower


def classify_utilization(utilization_percent: float, bands: list[Band]) -> Classification:
    """Return the first band in ``bands`` that contains ``utilization_percent``.

    Bands must be ordered from the highest lower bound down and end with a
    catch-all band (``lower=None``).
    """
    for band in bands:
        if band.contains(utilization_percent):
            return Classification(label=band.label, description=band.description)
    raise ValueError("Band list has no catch-all band.")


def utilization_percent(required_hp: float, tractor_hp: float) -> float:
    return required_hp / tractor_hp * 100.0


def fit_bands(config: Optional[EngineConfig] = None) -> list[Band]:
    cfg = (config or DEFAULT_ENGINE_CONFIG).classification
    return [
        Band(OPTIMAL, "Power closely matched to the requirement", cfg.fit_optimal_min),
        Band(GOOD, "Good fit with a moderate power reserve", cfg.fit_good_min),
        Band(OVERPOWERED, "Tractor noticeably oversized for the job", cfg.fit_overpowered_min),
        Band(EXCESSIVE, "Excessive power: poor fuel and capital efficiency"),
    ]


def suitability_bands(config: Optional[EngineConfig] = None) -> list[Band]:
    cfg = (config or DEFAULT_ENGINE_CONFIG).classification
    optimal_floor = 100.0 / cfg.suitability_optimal_max_multiple
    return [
        Band(INSUFFICIENT, "Insufficient power for the requirement", 100.0, lower_inclusive=False),
        Band(OPTIMAL, "Optimal power for the job", optimal_floor),
        Band(OVERPOWERED, "More power than needed"),
    ]

"""Tests for recommendation output models: score invariants and serialization."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from tractor_advisor.models.recommendation import (
    RecommendationOptions,
    ScoreBreakdown,
    TractorScore,
)


def _breakdown(**overrides) -> ScoreBreakdown:
    fields = dict(efficiency=30.0, traction=18.0, soil=16.0, economic=10.0, availability=10.0)
    fields.update(overrides)
    return ScoreBreakdown(**fields)


class TestScoreBreakdown:
    def test_component_sum(self):
        assert _breakdown().component_sum() == pytest.approx(84.0)

    def test_negative_component_rejected(self):
        with pytest.raises(ValidationError):
            _breakdown(traction=-1.0)


class TestTractorScore:
    def test_valid_score(self):
        score = TractorScore(total=84.0, breakdown=_breakdown(), percentage_score=84.0)
        assert score.max_possible == 100.0

    def test_total_must_match_breakdown(self):
        with pytest.raises(ValidationError):
            TractorScore(total=80.0, breakdown=_breakdown(), percentage_score=80.0)

    def test_rounding_tolerance(self):
        TractorScore(total=84.005, breakdown=_breakdown(), percentage_score=84.0)

    def test_total_above_100_rejected(self):
        big = _breakdown(efficiency=60.0, traction=60.0)
        with pytest.raises(ValidationError):
            TractorScore(total=big.component_sum(), breakdown=big, percentage_score=100.0)

    def test_json_serializable(self):
        score = TractorScore(total=84.0, breakdown=_breakdown(), percentage_score=84.0)
        payload = json.loads(json.dumps(score.model_dump(mode="json")))
        assert set(payload["breakdown"]) == {
            "efficiency", "traction", "soil", "economic", "availability",
        }


class TestRecommendationOptions:
    def test_defaults(self):
        opts = RecommendationOptions()
        assert opts.limit is None
        assert opts.available_only is False

    def test_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            RecommendationOptions(limit=0)

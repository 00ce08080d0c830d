"""Tests for the shared utilization classifier and its two band sets."""

from __future__ import annotations

import pytest

from tractor_advisor.config import ClassificationConfig, EngineConfig
from tractor_advisor.recommendations.classification import (
    Band,
    classify_utilization,
    fit_bands,
    suitability_bands,
    utilization_percent,
)


class TestFitBands:
    @pytest.mark.parametrize("percent, label", [
        (100.0, "OPTIMAL"),
        (85.0, "OPTIMAL"),
        (84.99, "GOOD"),
        (70.0, "GOOD"),
        (69.99, "OVERPOWERED"),
        (50.0, "OVERPOWERED"),
        (49.99, "EXCESSIVE"),
        (5.0, "EXCESSIVE"),
    ])
    def test_boundaries(self, percent, label):
        assert classify_utilization(percent, fit_bands()).label == label

    def test_descriptions_present(self):
        for band in fit_bands():
            assert band.description

    def test_thresholds_from_config(self):
        cfg = EngineConfig(classification=ClassificationConfig(fit_optimal_min=95.0))
        assert classify_utilization(90.0, fit_bands(cfg)).label == "GOOD"


class TestSuitabilityBands:
    @pytest.mark.parametrize("percent, label", [
        (120.0, "INSUFFICIENT"),
        (100.01, "INSUFFICIENT"),
        (100.0, "OPTIMAL"),
        (80.0, "OPTIMAL"),
        (79.99, "OVERPOWERED"),
        (20.0, "OVERPOWERED"),
    ])
    def test_boundaries(self, percent, label):
        assert classify_utilization(percent, suitability_bands()).label == label


class TestClassifier:
    def test_first_matching_band_wins(self):
        bands = [Band("HIGH", "high", 50.0), Band("ANY", "any")]
        assert classify_utilization(75.0, bands).label == "HIGH"
        assert classify_utilization(10.0, bands).label == "ANY"

    def test_exclusive_lower_bound(self):
        bands = [Band("ABOVE", "above", 50.0, lower_inclusive=False), Band("REST", "rest")]
        assert classify_utilization(50.0, bands).label == "REST"

    def test_missing_catch_all_raises(self):
        with pytest.raises(ValueError):
            classify_utilization(10.0, [Band("HIGH", "high", 50.0)])

    def test_utilization_percent(self):
        assert utilization_percent(80.0, 100.0) == pytest.approx(80.0)

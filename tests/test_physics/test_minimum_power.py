"""
Tests for tractor_advisor/physics/minimum_power.py.

What we test
------------
  - HP_min = base * soil * slope * depth * 1.15 on a hand-computed case.
  - Factors are reported for explainability.
  - Missing depth falls back to the configured standard depth (factor 1.0).
  - Unknown soil uses factor 1.0 and the default cone index.
  - Slope factor grows monotonically with slope.
  - The 4WD requirement starts exactly at the steep cutoff.
"""

from __future__ import annotations

import pytest

from tractor_advisor.config import EngineConfig, MinimumPowerConfig
from tractor_advisor.models.machinery import Implement
from tractor_advisor.models.terrain import Terrain
from tractor_advisor.physics.minimum_power import calculate_minimum_power, slope_factor


class TestCalculateMinimumPower:
    def test_hand_computed_case(self, plow):
        terrain = Terrain(soil_type="clay", slope_percentage=12)
        result = calculate_minimum_power(plow, terrain)

        # 50 * 1.3 * 1.06 * 1.2 = 82.68; * 1.15 = 95.082
        assert result.calculated_power_hp == pytest.approx(82.68)
        assert result.minimum_power_hp == pytest.approx(95.08)
        assert result.factors.soil_factor == pytest.approx(1.3)
        assert result.factors.slope_factor == pytest.approx(1.06)
        assert result.factors.depth_factor == pytest.approx(1.2)
        assert result.factors.cone_index == 45.0
        assert result.factors.safety_margin == 0.15
        assert result.requires_four_wheel_drive is False

    def test_missing_depth_uses_standard(self):
        implement = Implement(power_requirement_hp=40)
        result = calculate_minimum_power(implement, Terrain(soil_type="loam"))
        assert result.working_depth_m == 0.25
        assert result.factors.depth_factor == 1.0
        assert result.minimum_power_hp == pytest.approx(46.0)

    def test_missing_depth_follows_configured_standard(self):
        cfg = EngineConfig(minimum_power=MinimumPowerConfig(standard_depth_m=0.4))
        result = calculate_minimum_power(Implement(power_requirement_hp=40), Terrain(soil_type="loam"), cfg)
        assert result.working_depth_m == 0.4
        assert result.factors.depth_factor == 1.0

    def test_unknown_soil_defaults(self):
        implement = Implement(power_requirement_hp=40)
        result = calculate_minimum_power(implement, Terrain(soil_type="peat"))
        assert result.factors.soil_factor == 1.0
        assert result.factors.cone_index == 35.0

    def test_steep_cutoff_inclusive(self, plow):
        at_cutoff = calculate_minimum_power(plow, Terrain(soil_type="loam", slope_percentage=15))
        below = calculate_minimum_power(plow, Terrain(soil_type="loam", slope_percentage=14.9))
        assert at_cutoff.requires_four_wheel_drive is True
        assert below.requires_four_wheel_drive is False

    def test_safety_margin_configurable(self, plow):
        cfg = EngineConfig(minimum_power=MinimumPowerConfig(safety_margin=0.0))
        result = calculate_minimum_power(plow, Terrain(soil_type="loam"), cfg)
        assert result.minimum_power_hp == result.calculated_power_hp


class TestSlopeFactor:
    def test_flat_is_one(self):
        assert slope_factor(0) == 1.0

    def test_monotonic(self):
        values = [slope_factor(s) for s in (0, 5, 10, 15, 30)]
        assert values == sorted(values)
        assert slope_factor(20) == pytest.approx(1.1)

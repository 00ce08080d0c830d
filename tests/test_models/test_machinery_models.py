"""
Tests for tractor_advisor/models/machinery.py and models/terrain.py.

What we test
------------
Tractor:
  - Traction/status labels normalize at construction.
  - engine_power_hp must be > 0 and finite; NaN is rejected.
  - Numeric strings are coerced.
  - Frozen: assignment raises.
  - display_name fallbacks.

Implement:
  - working_depth_cm converts to metres; implement_name alias.
  - working_depth_m stays None when absent.

Terrain:
  - soil synonyms normalize; unknown soil is accepted.
  - Negative or NaN slope/altitude rejected.
"""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from tractor_advisor.models.machinery import Implement, Tractor
from tractor_advisor.models.terrain import Terrain
from tractor_advisor.taxonomy.machinery_taxonomy import TractionType, TractorStatus
from tractor_advisor.taxonomy.soil_taxonomy import SoilType


class TestTractor:
    def test_normalizes_labels(self):
        t = Tractor(engine_power_hp=90, traction_type="4X4", status="active")
        assert t.traction_type == TractionType.FOUR_WHEEL_DRIVE
        assert t.status == TractorStatus.AVAILABLE

    def test_defaults(self):
        t = Tractor(engine_power_hp=90)
        assert t.traction_type == TractionType.TWO_WHEEL_DRIVE
        assert t.status == TractorStatus.AVAILABLE
        assert t.weight_kg is None

    def test_numeric_string_coerced(self):
        assert Tractor(engine_power_hp="95.00").engine_power_hp == pytest.approx(95.0)

    @pytest.mark.parametrize("hp", [0, -10, math.nan, math.inf])
    def test_invalid_engine_power_rejected(self, hp):
        with pytest.raises(ValidationError):
            Tractor(engine_power_hp=hp)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            Tractor(engine_power_hp=90, weight_kg=-1)

    def test_frozen(self):
        t = Tractor(engine_power_hp=90)
        with pytest.raises(ValidationError):
            t.engine_power_hp = 100

    def test_display_name_fallbacks(self):
        assert Tractor(engine_power_hp=90, name="Blue").display_name == "Blue"
        assert Tractor(engine_power_hp=90, brand="Kubota", model="M7").display_name == "Kubota M7"
        assert Tractor(engine_power_hp=90, tractor_id=7).display_name == "tractor #7"
        assert Tractor(engine_power_hp=90).display_name == "90 HP tractor"


class TestImplement:
    def test_depth_cm_converted(self):
        imp = Implement(power_requirement_hp=50, working_depth_cm=30)
        assert imp.working_depth_m == pytest.approx(0.30)

    def test_depth_m_wins_over_cm(self):
        imp = Implement(power_requirement_hp=50, working_depth_m=0.2, working_depth_cm=30)
        assert imp.working_depth_m == pytest.approx(0.2)

    def test_name_alias(self):
        assert Implement(power_requirement_hp=50, implement_name="Plow").name == "Plow"

    def test_depth_absent_stays_none(self):
        assert Implement(power_requirement_hp=50).working_depth_m is None

    def test_power_requirement_must_be_positive(self):
        with pytest.raises(ValidationError):
            Implement(power_requirement_hp=0)


class TestTerrain:
    def test_soil_synonym(self):
        assert Terrain(soil_type="Arcilla").soil_type == SoilType.CLAY

    def test_unknown_soil_accepted(self):
        assert Terrain(soil_type="moon dust").soil_type == SoilType.UNKNOWN

    @pytest.mark.parametrize("field", ["slope_percentage", "altitude_meters"])
    @pytest.mark.parametrize("value", [-1.0, math.nan, math.inf])
    def test_invalid_numbers_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Terrain(soil_type="loam", **{field: value})

    def test_temperature_optional(self):
        assert Terrain(soil_type="loam").temperature_celsius is None

    def test_display_name(self):
        assert Terrain(soil_type="loam", terrain_id=4).display_name == "terrain #4"
        assert Terrain(soil_type="loam").display_name == "loam terrain"

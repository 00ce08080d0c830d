"""
Tests for tractor_advisor/physics/power_loss.py.

What we test
------------
Individual terms:
  - slope, altitude, rolling and slippage formulas on hand-computed values.
  - Zero slope/altitude/weight/speed gives exactly 0, never negative.
  - rolling_coefficient: 1.2 / Cn + 0.04; UNKNOWN uses the configured Cn.
  - default slippage per traction type.
  - temperature loss: 0 at or below 15 C, 1 % per 5 C above.
  - transmission loss: 13 % of the derated engine power.

calculate_power_loss():
  - Full breakdown on a hand-computed case.
  - Net power floored at 0.
  - carried weight and slippage override.
  - Temperature and transmission reported outside the total unless
    include_drivetrain_losses is set.
  - Out-of-range speed / load / slippage raise ValueError.

Slope conversions round-trip at 45 degrees.
"""

from __future__ import annotations

import pytest

from tractor_advisor.config import EngineConfig, PowerModelConfig
from tractor_advisor.models.terrain import Terrain
from tractor_advisor.physics.power_loss import (
    altitude_loss_hp,
    calculate_power_loss,
    default_slippage_percent,
    degrees_to_slope_percent,
    rolling_coefficient,
    rolling_resistance_loss_hp,
    slippage_loss_hp,
    slope_loss_hp,
    slope_percent_to_degrees,
    temperature_loss_hp,
    transmission_loss_hp,
)
from tractor_advisor.taxonomy.machinery_taxonomy import TractionType
from tractor_advisor.taxonomy.soil_taxonomy import SoilType


class TestLossTerms:
    def test_slope_loss(self):
        # 2730 kg * 10 km/h * 0.10 / 273 = 10 HP
        assert slope_loss_hp(2730, 10, 10) == pytest.approx(10.0)

    @pytest.mark.parametrize("weight, speed, slope", [(0, 10, 10), (2730, 0, 10), (2730, 10, 0)])
    def test_slope_loss_zero_inputs(self, weight, speed, slope):
        assert slope_loss_hp(weight, speed, slope) == 0.0

    def test_altitude_loss_three_percent_per_300m(self):
        assert altitude_loss_hp(100, 300) == pytest.approx(3.0)
        assert altitude_loss_hp(100, 1500) == pytest.approx(15.0)

    def test_altitude_loss_sea_level(self):
        assert altitude_loss_hp(100, 0) == 0.0

    def test_rolling_coefficient_loam(self):
        assert rolling_coefficient(SoilType.LOAM) == pytest.approx(1.2 / 35 + 0.04)

    def test_rolling_coefficient_sandy(self):
        assert rolling_coefficient(SoilType.SANDY) == pytest.approx(0.088)

    def test_unknown_soil_uses_default_cone_index(self):
        assert rolling_coefficient(SoilType.UNKNOWN) == rolling_coefficient(SoilType.LOAM)
        cfg = EngineConfig(power_model=PowerModelConfig(default_cone_index=50.0))
        assert rolling_coefficient(SoilType.UNKNOWN, cfg) == pytest.approx(0.064)

    def test_rolling_loss(self):
        assert rolling_resistance_loss_hp(2730, 0.1, 10) == pytest.approx(10.0)
        assert rolling_resistance_loss_hp(0, 0.1, 10) == 0.0

    def test_slippage_loss(self):
        assert slippage_loss_hp(100, 8) == pytest.approx(8.0)
        assert slippage_loss_hp(100, 0) == 0.0

    def test_default_slippage_by_traction(self):
        assert default_slippage_percent(TractionType.FOUR_WHEEL_DRIVE) == 8.0
        assert default_slippage_percent(TractionType.TWO_WHEEL_DRIVE) == 15.0
        assert default_slippage_percent(TractionType.TRACKED) == 5.0

    @pytest.mark.parametrize("temperature", [-5.0, 10.0, 15.0])
    def test_no_temperature_loss_at_or_below_base(self, temperature):
        assert temperature_loss_hp(100, temperature) == 0.0

    def test_temperature_loss_at_35c(self):
        # 20 C above base: 4 steps of 1 %
        assert temperature_loss_hp(100, 35) == pytest.approx(4.0)

    def test_transmission_loss(self):
        assert transmission_loss_hp(100) == pytest.approx(13.0)
        assert transmission_loss_hp(0) == 0.0
        cfg = EngineConfig(power_model=PowerModelConfig(transmission_loss_fraction=0.15))
        assert transmission_loss_hp(100, cfg) == pytest.approx(15.0)


class TestCalculatePowerLoss:
    def _terrain(self) -> Terrain:
        return Terrain(soil_type="loam", slope_percentage=10, altitude_meters=300)

    def test_full_breakdown(self, make_tractor):
        tractor = make_tractor(engine_power_hp=100, weight_kg=2730, traction_type="4wd")
        result = calculate_power_loss(tractor, self._terrain(), speed_kmh=10)

        assert result.losses.slope == pytest.approx(10.0)
        assert result.losses.altitude == pytest.approx(3.0)
        assert result.losses.rolling_resistance == pytest.approx(7.43)
        assert result.losses.slippage == pytest.approx(8.0)
        assert result.losses.total == pytest.approx(28.43)
        assert result.net_power_hp == pytest.approx(71.57)
        assert result.efficiency_percent == pytest.approx(71.57)
        assert result.slippage_percent == 8.0

    def test_flat_sea_level_light_tractor_only_slips(self, make_tractor):
        tractor = make_tractor(engine_power_hp=100, weight_kg=None, traction_type="2wd")
        terrain = Terrain(soil_type="loam")
        result = calculate_power_loss(tractor, terrain, speed_kmh=8)
        assert result.losses.slope == 0.0
        assert result.losses.altitude == 0.0
        assert result.losses.rolling_resistance == 0.0
        assert result.losses.slippage == pytest.approx(15.0)

    def test_net_power_floored_at_zero(self, make_tractor):
        tractor = make_tractor(engine_power_hp=10, weight_kg=20000)
        terrain = Terrain(soil_type="wet_clay", slope_percentage=30)
        result = calculate_power_loss(tractor, terrain, speed_kmh=10)
        assert result.net_power_hp == 0.0
        assert result.efficiency_percent == 0.0
        assert result.losses.total > tractor.engine_power_hp

    def test_carried_weight_added(self, make_tractor):
        tractor = make_tractor(weight_kg=3000)
        result = calculate_power_loss(tractor, self._terrain(), carried_weight_kg=500)
        assert result.total_weight_kg == 3500

    def test_slippage_override(self, make_tractor):
        result = calculate_power_loss(make_tractor(), self._terrain(), slippage_percent=0)
        assert result.losses.slippage == 0.0
        assert result.slippage_percent == 0

    @pytest.mark.parametrize("kwargs", [
        {"speed_kmh": -1},
        {"carried_weight_kg": -5},
        {"slippage_percent": 150},
    ])
    def test_out_of_range_inputs_raise(self, make_tractor, kwargs):
        with pytest.raises(ValueError):
            calculate_power_loss(make_tractor(), self._terrain(), **kwargs)


class TestSlopeConversions:
    def test_100_percent_is_45_degrees(self):
        assert slope_percent_to_degrees(100) == pytest.approx(45.0)
        assert degrees_to_slope_percent(45) == pytest.approx(100.0)

    def test_flat(self):
        assert slope_percent_to_degrees(0) == 0.0

    def test_vertical_rejected(self):
        with pytest.raises(ValueError):
            degrees_to_slope_percent(90)


class TestDrivetrainLosses:
    def _tractor(self, make_tractor):
        return make_tractor(engine_power_hp=100, weight_kg=2730, traction_type="4wd")

    def test_at_15c_no_temperature_loss(self, make_tractor):
        terrain = Terrain(soil_type="loam", slope_percentage=10, altitude_meters=300,
                          temperature_celsius=15)
        result = calculate_power_loss(self._tractor(make_tractor), terrain, speed_kmh=10)

        assert result.temperature_celsius == 15.0
        assert result.losses.temperature == 0.0
        assert result.losses.transmission == pytest.approx(12.61)   # (100 - 3) * 0.13

    def test_missing_temperature_uses_default(self, make_tractor):
        terrain = Terrain(soil_type="loam")
        result = calculate_power_loss(self._tractor(make_tractor), terrain)
        assert result.temperature_celsius == 15.0
        assert result.losses.temperature == 0.0

    def test_at_35c_reported_outside_total(self, make_tractor):
        terrain = Terrain(soil_type="loam", slope_percentage=10, altitude_meters=300,
                          temperature_celsius=35)
        result = calculate_power_loss(self._tractor(make_tractor), terrain, speed_kmh=10)

        assert result.losses.temperature == pytest.approx(4.0)
        assert result.losses.transmission == pytest.approx(12.09)   # (100 - 3 - 4) * 0.13
        assert result.losses.drivetrain_included is False
        assert result.losses.total == pytest.approx(28.43)

    def test_at_35c_included_in_total(self, make_tractor):
        terrain = Terrain(soil_type="loam", slope_percentage=10, altitude_meters=300,
                          temperature_celsius=35)
        result = calculate_power_loss(
            self._tractor(make_tractor), terrain, speed_kmh=10, include_drivetrain_losses=True
        )

        assert result.losses.drivetrain_included is True
        assert result.losses.total == pytest.approx(44.52)
        assert result.net_power_hp == pytest.approx(55.48)

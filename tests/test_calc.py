"""Tests for fire behavior relationships and unit conversions."""

import pytest

from wildfirefx.core import particles
from wildfirefx.fire import calc


class TestConversions:

    def test_spread_rate_units(self):
        assert calc.chains_per_hour_to_ft_per_min(10.0) == pytest.approx(11.0)
        assert calc.ft_per_min_to_chains_per_hour(11.0) == pytest.approx(10.0, rel=1e-3)

    def test_wind_and_length_units(self):
        assert calc.mph_to_ft_per_sec(10.0) == pytest.approx(14.6667)
        assert calc.meters_to_feet(1.8288) == pytest.approx(6.0, rel=1e-5)

    def test_wind_factor_shared_with_particle_drift(self):
        assert calc.MPH_TO_FT_PER_SEC is particles.MPH_TO_FT_PER_SEC


class TestByram:
    """Flame length / fireline intensity relationships."""

    def test_flame_length_from_intensity(self):
        assert calc.compute_flame_length(5178.0) == pytest.approx(23.1, rel=0.02)

    def test_intensity_from_flame_length(self):
        assert calc.compute_intensity_from_flame_length(1.0) == pytest.approx(5.67)

    def test_relationships_are_near_inverse(self):
        for fl in (1.0, 4.0, 10.0, 25.0):
            fli = calc.compute_intensity_from_flame_length(fl)
            assert calc.compute_flame_length(fli) == pytest.approx(fl, rel=0.02)

    def test_fireline_intensity(self):
        assert calc.compute_fireline_intensity(1000.0, 10.0) == pytest.approx(1000.0 * 11.0 / 60.0)


class TestHaulChart:
    """Heat per area and spread rate that yield a given flame length."""

    def test_heat_area_reproduces_intensity(self):
        heat = calc.compute_heat_area(8.0, 20.0)
        fli = calc.compute_fireline_intensity(heat, 20.0)
        assert fli == pytest.approx(calc.compute_intensity_from_flame_length(8.0))

    def test_ros_reproduces_intensity(self):
        ros = calc.compute_ros_chains_per_hour(8.0, 500.0)
        fli = calc.compute_fireline_intensity(500.0, ros)
        assert fli == pytest.approx(calc.compute_intensity_from_flame_length(8.0), rel=1e-3)

    def test_non_positive_inputs_raise(self):
        with pytest.raises(ValueError):
            calc.compute_heat_area(8.0, 0.0)
        with pytest.raises(ValueError):
            calc.compute_ros_chains_per_hour(8.0, 0.0)


class TestSampleFromFlameLength:

    def test_builds_consistent_sample(self):
        sample = calc.sample_from_flame_length(10.0, 1000.0, fuel_bed_depth=2.0,
                                               effective_wind_speed=4.0)
        fli = calc.compute_intensity_from_flame_length(10.0)
        assert sample.flame_length == 10.0
        assert sample.fireline_intensity == pytest.approx(fli)
        assert sample.rate_of_spread_max == pytest.approx(60.0 * fli / 1000.0)
        assert sample.rate_of_spread_flanking == pytest.approx(sample.rate_of_spread_max * 0.1)
        assert sample.fuel_bed_depth == 2.0
        assert sample.effective_wind_speed == 4.0
        assert sample.validate() is sample

    def test_zero_heat_has_no_spread(self):
        sample = calc.sample_from_flame_length(3.0, 0.0)
        assert sample.rate_of_spread_max == 0.0

    def test_negative_flame_length_rejected(self):
        with pytest.raises(calc.InvalidFireBehaviorError):
            calc.sample_from_flame_length(-3.0, 1000.0)

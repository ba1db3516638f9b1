"""Tests for spline easing."""

import numpy as np
import pytest

from wildfirefx.core.easing import (
    BezierCurve,
    CURVES,
    EASE_IN,
    LINEAR,
    WINDWARD_SPLINE,
    Y_SPLINE,
    ease,
    get_curve,
    interpolate_color,
    lerp,
)


class TestBezierCurve:
    """Tests for cubic bezier timing curves."""

    @pytest.mark.parametrize("name", sorted(CURVES))
    def test_endpoints_are_exact(self, name):
        curve = CURVES[name]
        assert curve(0.0) == 0.0
        assert curve(1.0) == 1.0

    @pytest.mark.parametrize("name", sorted(CURVES))
    def test_named_curves_are_monotonic(self, name):
        curve = CURVES[name]
        values = [curve(t) for t in np.linspace(0, 1, 201)]
        assert all(b >= a - 1e-6 for a, b in zip(values, values[1:]))

    def test_input_is_clamped(self):
        assert EASE_IN(-0.5) == 0.0
        assert EASE_IN(1.5) == 1.0

    def test_linear_matches_identity(self):
        for t in np.linspace(0, 1, 11):
            assert LINEAR(t) == pytest.approx(t, abs=1e-5)

    def test_ease_in_starts_slow(self):
        assert EASE_IN(0.25) < 0.25
        assert EASE_IN(0.5) < 0.5

    def test_interpolate_maps_to_range(self):
        assert WINDWARD_SPLINE.interpolate(5.0, 0.0, 0.0) == 5.0
        assert WINDWARD_SPLINE.interpolate(5.0, 0.0, 1.0) == 0.0
        assert 0.0 < WINDWARD_SPLINE.interpolate(5.0, 0.0, 0.5) < 5.0

    def test_flame_splines_stay_in_unit_range(self):
        for t in np.linspace(0, 1, 51):
            assert 0.0 <= Y_SPLINE(t) <= 1.0
            assert 0.0 <= WINDWARD_SPLINE(t) <= 1.0

    def test_custom_curve(self):
        curve = BezierCurve(0.25, 0.1, 0.25, 1.0)
        assert 0.0 < curve(0.5) < 1.0


class TestEaseHelpers:
    """Tests for ease/lerp helpers and the curve registry."""

    def test_ease_endpoints(self):
        assert ease(10.0, 20.0, 0.0) == 10.0
        assert ease(10.0, 20.0, 1.0) == 20.0

    def test_ease_clamps_progress(self):
        assert ease(10.0, 20.0, 2.0) == 20.0
        assert ease(10.0, 20.0, -1.0) == 10.0

    def test_ease_accepts_curve_name(self):
        assert ease(0.0, 1.0, 0.5, 'linear') == pytest.approx(0.5, abs=1e-5)

    def test_lerp(self):
        assert lerp(0.0, 0.7, 0.5) == pytest.approx(0.35)

    def test_unknown_curve_raises(self):
        with pytest.raises(ValueError, match="Unknown curve"):
            get_curve('wobbly')

    def test_interpolate_color_endpoints(self):
        red = (255, 0, 0)
        yellow = (255, 255, 0)
        assert interpolate_color(red, yellow, 0.0) == red
        assert interpolate_color(red, yellow, 1.0) == yellow
        assert interpolate_color(red, yellow, 0.5, EASE_IN)[1] < 128

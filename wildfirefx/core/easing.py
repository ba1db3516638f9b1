"""
Spline Easing for Flame Shaping

Cubic bezier timing curves used to shape randomized particle draws into a
coherent flame silhouette, and to blend particle colors as they age.

Curves follow the CSS/JavaFX "spline" convention:
    P0 = (0, 0), P1 = (x1, y1), P2 = (x2, y2), P3 = (1, 1)

Named curves:
- LINEAR:    Constant rate
- EASE_IN:   Starts slow, accelerates
- EASE_OUT:  Starts fast, decelerates
- EASE_BOTH: Slow-fast-slow
- WINDWARD_SPLINE / LEEWARD_SPLINE: lateral velocity profiles
- X_SPLINE / Y_SPLINE: flame body profiles
"""

import numpy as np
from typing import Callable, Dict, Tuple, Union
from dataclasses import dataclass


RGB = Tuple[int, int, int]


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation"""
    return a + (b - a) * t


# =============================================================================
# Cubic Bezier Curves
# =============================================================================

@dataclass(frozen=True)
class BezierCurve:
    """
    Cubic Bezier easing curve (like CSS cubic-bezier)

    Control points: P0=(0,0), P1=(x1,y1), P2=(x2,y2), P3=(1,1)

    The curve is monotonic in y whenever the control points keep the
    derivative positive, which holds for every named curve in this module.
    """
    x1: float
    y1: float
    x2: float
    y2: float

    def __call__(self, t: float) -> float:
        """Evaluate curve at progress t (clamped to 0-1)"""
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0
        return self._sample_curve_y(self._solve_curve_x(t))

    def interpolate(self, start: float, end: float, t: float) -> float:
        """Interpolate from start to end with this curve's timing"""
        return start + (end - start) * self(t)

    def _solve_curve_x(self, x: float, epsilon: float = 1e-7) -> float:
        """Newton-Raphson to find the curve parameter for a given x"""
        t = x
        for _ in range(8):
            x_at_t = self._sample_curve_x(t) - x
            if abs(x_at_t) < epsilon:
                return t
            d = self._sample_curve_x_derivative(t)
            if abs(d) < 1e-6:
                break
            t -= x_at_t / d

        # Fallback: bisection
        t0, t1 = 0.0, 1.0
        t = x
        for _ in range(64):
            x_at_t = self._sample_curve_x(t)
            if abs(x_at_t - x) < epsilon:
                break
            if x > x_at_t:
                t0 = t
            else:
                t1 = t
            t = (t0 + t1) / 2
        return t

    def _sample_curve_x(self, t: float) -> float:
        return ((1 - 3 * self.x2 + 3 * self.x1) * t + (3 * self.x2 - 6 * self.x1)) * t * t + 3 * self.x1 * t

    def _sample_curve_y(self, t: float) -> float:
        return ((1 - 3 * self.y2 + 3 * self.y1) * t + (3 * self.y2 - 6 * self.y1)) * t * t + 3 * self.y1 * t

    def _sample_curve_x_derivative(self, t: float) -> float:
        return (3 * (1 - 3 * self.x2 + 3 * self.x1) * t + 2 * (3 * self.x2 - 6 * self.x1)) * t + 3 * self.x1


# =============================================================================
# Named Curves
# =============================================================================

LINEAR = BezierCurve(0.0, 0.0, 1.0, 1.0)
EASE_IN = BezierCurve(0.42, 0.0, 1.0, 1.0)
EASE_OUT = BezierCurve(0.0, 0.0, 0.58, 1.0)
EASE_BOTH = BezierCurve(0.42, 0.0, 0.58, 1.0)

# Flame shaping. The windward spline pulls lateral velocity toward zero as
# the vertical draw grows, producing the tapered flame tip.
WINDWARD_SPLINE = BezierCurve(0.2, 0.8, 0.8, 0.2)
LEEWARD_SPLINE = BezierCurve(0.8, 0.2, 0.2, 0.8)
X_SPLINE = BezierCurve(0.0, 0.8004, 0.8, 1.0)
Y_SPLINE = BezierCurve(0.2, 0.8, 0.8, 0.2)


CURVES: Dict[str, BezierCurve] = {
    'linear': LINEAR,
    'ease_in': EASE_IN,
    'ease_out': EASE_OUT,
    'ease_both': EASE_BOTH,
    'windward': WINDWARD_SPLINE,
    'leeward': LEEWARD_SPLINE,
    'x_spline': X_SPLINE,
    'y_spline': Y_SPLINE,
}


def get_curve(name: str) -> BezierCurve:
    """
    Get a named curve.

    Raises:
        ValueError: If the curve name is not registered
    """
    if name not in CURVES:
        available = ', '.join(sorted(CURVES.keys()))
        raise ValueError(f"Unknown curve '{name}'. Available: {available}")
    return CURVES[name]


def ease(
    p0: float,
    p1: float,
    t: float,
    curve: Union[str, Callable[[float], float]] = EASE_BOTH
) -> float:
    """
    Interpolate between p0 and p1 with easing.

    Args:
        p0: Value at t=0
        p1: Value at t=1
        t: Progress 0-1 (clamped)
        curve: Curve name or callable mapping 0-1 to 0-1

    Returns:
        Interpolated value
    """
    if isinstance(curve, str):
        curve = get_curve(curve)
    t = float(np.clip(t, 0.0, 1.0))
    return p0 + (p1 - p0) * curve(t)


def interpolate_color(
    start: RGB,
    end: RGB,
    t: float,
    curve: Union[str, Callable[[float], float]] = LINEAR
) -> RGB:
    """
    Blend two RGB colors channel by channel.

    Returns start at t=0 and end at t=1 exactly.
    """
    return tuple(
        int(round(ease(float(s), float(e), t, curve)))
        for s, e in zip(start, end)
    )

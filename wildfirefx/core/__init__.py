"""
Core building blocks: easing splines, particles and render surfaces
"""

from .easing import (
    BezierCurve,
    LINEAR,
    EASE_IN,
    EASE_OUT,
    EASE_BOTH,
    WINDWARD_SPLINE,
    LEEWARD_SPLINE,
    X_SPLINE,
    Y_SPLINE,
    CURVES,
    get_curve,
    ease,
    lerp,
    interpolate_color,
)
from .surface import BlendMode, RenderSurface, ArraySurface
from .particles import (
    Particle,
    ParticlePool,
    ParticleSnapshot,
    make_wind_drift,
    REFERENCE_FRAME_RATE,
    MIN_FRAME_RATE,
)
from .utils import ColorUtils

__all__ = [
    # Easing
    'BezierCurve',
    'LINEAR',
    'EASE_IN',
    'EASE_OUT',
    'EASE_BOTH',
    'WINDWARD_SPLINE',
    'LEEWARD_SPLINE',
    'X_SPLINE',
    'Y_SPLINE',
    'CURVES',
    'get_curve',
    'ease',
    'lerp',
    'interpolate_color',
    # Surfaces
    'BlendMode',
    'RenderSurface',
    'ArraySurface',
    # Particles
    'Particle',
    'ParticlePool',
    'ParticleSnapshot',
    'make_wind_drift',
    'REFERENCE_FRAME_RATE',
    'MIN_FRAME_RATE',
    # Utils
    'ColorUtils',
]

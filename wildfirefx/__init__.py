"""
WildfireFX - Particle flame animation driven by wildland fire behavior
"""

from .core import ArraySurface, BlendMode, Particle, ParticlePool, ColorUtils
from .fire import (
    FireBehaviorSample,
    InvalidFireBehaviorError,
    load_fire_behavior,
    FireEmitter,
    EmitterConfig,
    EmitterCalibration,
    InvalidConfigError,
    FireSimulation,
)

__version__ = "0.1.0"
__all__ = [
    'ArraySurface',
    'BlendMode',
    'Particle',
    'ParticlePool',
    'ColorUtils',
    'FireBehaviorSample',
    'InvalidFireBehaviorError',
    'load_fire_behavior',
    'FireEmitter',
    'EmitterConfig',
    'EmitterCalibration',
    'InvalidConfigError',
    'FireSimulation',
    'simulate',
]


def simulate(
    sample: FireBehaviorSample = None,
    output_path: str = None,
    frames: int = 120,
    width: int = 640,
    height: int = 480,
    fps: float = 60.0,
    warmup: int = 30,
    seed: int = None,
    calibration: EmitterCalibration = None,
    wind: bool = False,
    start_color: tuple = None,
    end_color: tuple = None,
    background: tuple = (0, 0, 0),
):
    """
    Render a flame headless and optionally export it.

    Args:
        sample: Fire behavior to drive the flame (emitter defaults if None)
        output_path: '.gif' for an animation, any other path is treated as a
            directory of PNG frames; nothing is written if None
        frames: Number of frames to capture
        width, height: Canvas size in pixels
        fps: Simulated frame rate
        warmup: Frames simulated before capture begins
        seed: Random seed for reproducible output
        calibration: Emitter coefficient overrides
        wind: Enable wind drift
        start_color, end_color: Particle colors (RGB)
        background: Clear color

    Returns:
        (frames, output) where frames is a list of RGBA arrays and output is
        the written path(s) or None
    """
    from pathlib import Path
    from .core.exporter import FrameExporter, render_frames

    emitter = FireEmitter(calibration=calibration, seed=seed, wind_enabled=wind)
    if start_color is not None:
        emitter.set_colors(start_color, end_color)
    if sample is not None:
        emitter.configure(sample)

    simulation = FireSimulation(emitter)
    captured = render_frames(
        simulation, frames, width, height,
        fps=fps, background=background, warmup=warmup
    )

    output = None
    if output_path is not None:
        path = Path(output_path)
        if path.suffix.lower() == '.gif':
            output = FrameExporter.to_gif(captured, path, duration=int(round(1000 / fps)))
        else:
            output = FrameExporter.to_frames(captured, path)

    return captured, output

"""
Fire behavior inputs, flame emitter and simulation driver
"""

from .behavior import FireBehaviorSample, InvalidFireBehaviorError, load_fire_behavior
from .emitter import (
    FireEmitter,
    EmitterConfig,
    EmitterCalibration,
    InvalidConfigError,
    DEFAULT_CALIBRATION,
)
from .simulation import FireSimulation, FrameRateMeter, SimulationStats
from . import calc

__all__ = [
    'FireBehaviorSample',
    'InvalidFireBehaviorError',
    'load_fire_behavior',
    'FireEmitter',
    'EmitterConfig',
    'EmitterCalibration',
    'InvalidConfigError',
    'DEFAULT_CALIBRATION',
    'FireSimulation',
    'FrameRateMeter',
    'SimulationStats',
    'calc',
]

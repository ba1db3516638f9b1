"""
Fire Emitter

Turns fire behavior into a flame-shaped stream of particles.

Each frame a random fraction of the configured particle count is emitted.
Initial positions spread across the flame base; velocities are shaped by
splines so particles far from the center rise slowly and particles destined
to rise highest lose their lateral speed, which tapers the flame tip.

Configuration is an immutable EmitterConfig snapshot. A new fire behavior
sample produces a new snapshot through EmitterCalibration; the emitter
publishes it with a single assignment so a render loop on another thread
never sees a half-updated configuration.

Example:
    emitter = FireEmitter(seed=7)
    emitter.configure(sample)
    particles = emitter.emit(320, 470)
"""

import logging
import math
import threading
import numpy as np
from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Dict, List, Optional, Tuple

from ..core.easing import WINDWARD_SPLINE, Y_SPLINE, lerp
from ..core.particles import Particle, make_wind_drift
from ..core.surface import BlendMode
from .behavior import FireBehaviorSample, InvalidFireBehaviorError


logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

YELLOW = (255, 255, 0)
RED = (255, 0, 0)


class InvalidConfigError(ValueError):
    """An emitter configuration or calibration violates its invariants"""


# =============================================================================
# Calibration
# =============================================================================

@dataclass(frozen=True)
class EmitterCalibration:
    """
    Tuning coefficients mapping fire behavior to emitter parameters.

    These are the art-direction knobs of the effect. Override any of them
    directly or load them from YAML (see core.presets.load_calibration).
    """
    vertical_velocity_per_ft: float = 1.0       # y velocity per ft of flame length
    horizontal_velocity_per_ft: float = 0.2     # x velocity per ft of flame length
    x_variance_per_heat: float = 0.02           # base half-width per Btu/ft2
    x_variance_per_depth: float = 5.0           # base half-width per ft of fuel bed
    y_variance_per_depth: float = 3.0           # base height per ft of fuel bed
    radius_per_ft: float = 5.0                  # particle size per ft of flame length
    max_radius: float = 100.0
    heat_per_particle: float = 3.0              # Btu/ft2 per particle in a batch
    max_particles: int = 150
    expire_time_base: float = 0.7               # seconds
    expire_time_per_residence: float = 1.0      # seconds per minute of residence time
    min_expire_time: float = 1.0 / 60.0         # floor for any particle lifespan

    def validate(self) -> 'EmitterCalibration':
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value) or value < 0:
                raise InvalidConfigError(f"Calibration {f.name} must be finite and non-negative, got {value}")
        if self.heat_per_particle <= 0:
            raise InvalidConfigError("Calibration heat_per_particle must be positive")
        if self.min_expire_time <= 0:
            raise InvalidConfigError("Calibration min_expire_time must be positive")
        return self

    def derive(
        self,
        sample: FireBehaviorSample,
        start_color: RGB = YELLOW,
        end_color: Optional[RGB] = RED,
        blend_mode: BlendMode = BlendMode.SRC_OVER
    ) -> 'EmitterConfig':
        """Compute every emitter parameter from a validated sample"""
        fl = sample.flame_length
        heat = sample.heat_release
        depth = sample.fuel_bed_depth

        config = EmitterConfig(
            y_velocity=fl * self.vertical_velocity_per_ft,
            x_velocity=fl * self.horizontal_velocity_per_ft,
            x_variance=heat * self.x_variance_per_heat + depth * self.x_variance_per_depth,
            y_variance=depth * self.y_variance_per_depth,
            radius=min(fl * self.radius_per_ft, self.max_radius),
            max_count=int(min(heat / self.heat_per_particle, self.max_particles)),
            expire_time=max(
                self.expire_time_base + sample.flame_residence_time * self.expire_time_per_residence,
                self.min_expire_time
            ),
            wind_speed=sample.effective_wind_speed,
            start_color=start_color,
            end_color=end_color,
            blend_mode=blend_mode,
            min_expire_time=self.min_expire_time,
        )
        return config.validate(self)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EmitterCalibration':
        """Create from dictionary, ignoring unknown keys"""
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        if 'max_particles' in filtered:
            filtered['max_particles'] = int(filtered['max_particles'])
        return cls(**filtered).validate()


# =============================================================================
# Emitter Configuration
# =============================================================================

@dataclass(frozen=True)
class EmitterConfig:
    """Snapshot of the parameters used for one or more emission batches"""
    y_velocity: float = 4.0
    x_velocity: float = 2.0
    x_variance: float = 40.0
    y_variance: float = 20.0
    radius: float = 25.0
    max_count: int = 40
    expire_time: float = 0.7
    wind_speed: float = 0.0
    start_color: RGB = YELLOW
    end_color: Optional[RGB] = RED
    blend_mode: BlendMode = BlendMode.SRC_OVER
    min_expire_time: float = 1.0 / 60.0

    def validate(self, calibration: Optional['EmitterCalibration'] = None) -> 'EmitterConfig':
        """
        Raises:
            InvalidConfigError: if a scale, variance or count is negative,
                the expiry time is not positive, or a cap is exceeded
        """
        calibration = calibration or DEFAULT_CALIBRATION
        for name in ('y_velocity', 'x_velocity', 'x_variance', 'y_variance',
                     'radius', 'max_count', 'wind_speed'):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidConfigError(f"{name} must be finite and non-negative, got {value}")
        if not math.isfinite(self.expire_time) or self.expire_time <= 0:
            raise InvalidConfigError(f"expire_time must be positive, got {self.expire_time}")
        if not math.isfinite(self.min_expire_time) or self.min_expire_time <= 0:
            raise InvalidConfigError(f"min_expire_time must be positive, got {self.min_expire_time}")
        if self.radius > calibration.max_radius:
            raise InvalidConfigError(f"radius {self.radius} exceeds cap {calibration.max_radius}")
        if self.max_count > calibration.max_particles:
            raise InvalidConfigError(f"max_count {self.max_count} exceeds cap {calibration.max_particles}")
        return self

    def clamp(self, calibration: 'EmitterCalibration') -> 'EmitterConfig':
        """Fit radius and count within the calibration caps, adopting its expiry floor"""
        radius = min(self.radius, calibration.max_radius)
        max_count = min(self.max_count, calibration.max_particles)
        unchanged = (radius == self.radius and max_count == self.max_count
                     and self.min_expire_time == calibration.min_expire_time)
        if unchanged:
            return self
        return replace(self, radius=radius, max_count=max_count,
                       min_expire_time=calibration.min_expire_time)


DEFAULT_CALIBRATION = EmitterCalibration()


# =============================================================================
# Emitter
# =============================================================================

class FireEmitter:
    """
    Emits flame particles shaped by the current configuration.

    Args:
        calibration: Coefficients used when deriving a config from a sample
        config: Initial configuration; must fit the calibration caps
            (defaults to EmitterConfig() clamped to them)
        seed: Seed for the internal random generator
        rng: Explicit numpy Generator (overrides seed)
        wind_enabled: Attach a wind drift modifier to emitted particles
    """

    def __init__(
        self,
        calibration: Optional[EmitterCalibration] = None,
        config: Optional[EmitterConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        wind_enabled: bool = False
    ):
        self.calibration = (calibration or DEFAULT_CALIBRATION).validate()
        if config is None:
            config = EmitterConfig().clamp(self.calibration)
        self._config = config.validate(self.calibration)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.wind_enabled = wind_enabled
        self.sample: Optional[FireBehaviorSample] = None
        self._lock = threading.Lock()

    @property
    def config(self) -> EmitterConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Reconfiguration
    # -------------------------------------------------------------------------

    def configure(self, sample: FireBehaviorSample) -> EmitterConfig:
        """
        Derive and publish a new configuration from a fire behavior sample.

        Raises:
            InvalidFireBehaviorError: if the sample fails validation; the
                previous configuration stays in effect
        """
        if not isinstance(sample, FireBehaviorSample):
            raise InvalidFireBehaviorError(f"Expected FireBehaviorSample, got {type(sample).__name__}")
        sample.validate()

        with self._lock:
            current = self._config
            config = self.calibration.derive(
                sample,
                start_color=current.start_color,
                end_color=current.end_color,
                blend_mode=current.blend_mode,
            )
            self._config = config
            self.sample = sample
        return config

    def try_configure(self, sample: FireBehaviorSample) -> bool:
        """Configure, keeping the last good configuration on bad input"""
        try:
            self.configure(sample)
        except (InvalidFireBehaviorError, InvalidConfigError) as e:
            logger.warning("Rejected fire behavior update: %s", e)
            return False
        return True

    def set_calibration(self, calibration: EmitterCalibration) -> EmitterConfig:
        """Swap coefficients and re-derive from the last accepted sample"""
        calibration.validate()
        with self._lock:
            self.calibration = calibration
            if self.sample is not None:
                current = self._config
                self._config = calibration.derive(
                    self.sample,
                    start_color=current.start_color,
                    end_color=current.end_color,
                    blend_mode=current.blend_mode,
                )
            else:
                self._config = self._config.clamp(calibration)
            return self._config

    def set_colors(self, start_color: RGB, end_color: Optional[RGB] = None) -> EmitterConfig:
        with self._lock:
            self._config = replace(self._config, start_color=tuple(start_color),
                                   end_color=tuple(end_color) if end_color is not None else None)
            return self._config

    def set_blend_mode(self, blend_mode: BlendMode) -> EmitterConfig:
        with self._lock:
            self._config = replace(self._config, blend_mode=blend_mode)
            return self._config

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def emit(self, x: float, y: float) -> List[Particle]:
        """
        Emit one batch of particles from an origin at the flame base.

        The batch size is the configured maximum scaled by a fresh uniform
        draw, so successive frames flicker between zero and the maximum.

        Args:
            x: Origin x (usually the horizontal center of the view)
            y: Origin y (usually just above the bottom edge)

        Returns:
            Newly created particles (possibly empty)
        """
        config = self._config
        rng = self.rng

        count = int(math.floor(config.max_count * rng.random()))
        if count <= 0:
            return []

        # Draws per particle: base height, base offset, pulse, lateral
        u_y0 = rng.random(count)
        u_x0 = (rng.random(count) - 0.5) * 2
        u_y2 = rng.random(count)
        u_x2 = (rng.random(count) - 0.5) * 2

        drift = None
        if self.wind_enabled and config.wind_speed > 0:
            drift = make_wind_drift(config.wind_speed, y)

        particles = []
        for i in range(count):
            x0 = float(u_x0[i])
            y2 = float(u_y2[i])

            x1 = x + x0 * config.x_variance
            y1 = y + float(u_y0[i]) * config.y_variance

            # Attenuate vy as x0 moves away from center to widen the base
            vy = Y_SPLINE.interpolate(0.0, config.y_velocity, y2) / (abs(x0) + 1)
            # Constrain vx as y2 grows to form the flame tip
            vx = WINDWARD_SPLINE.interpolate(float(u_x2[i]) * config.x_velocity, 0.0, y2)

            expire_time = max(lerp(0.0, config.expire_time, y2), config.min_expire_time)

            particles.append(Particle(
                x=x1,
                y=y1,
                vx=vx,
                vy=-vy,
                radius=config.radius,
                start_color=config.start_color,
                end_color=config.end_color,
                blend_mode=config.blend_mode,
                expire_time=expire_time,
                velocity_modifier=drift,
            ))

        return particles

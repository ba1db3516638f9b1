"""
Particle Lifecycle

Particles are born with life 1.0 and lose a fixed fraction of it every frame
until they expire. Motion is normalized to a 60 Hz reference so the animation
speed does not depend on the actual rendering frame rate.

States:
- ALIVE:   life > 0
- EXPIRED: life <= 0 (terminal; the pool drops the particle that frame)

Example:
    pool = ParticlePool()
    pool.add_all(emitter.emit(320, 470))
    pool.step(frame_rate, surface)
"""

import numpy as np
from typing import Callable, Iterator, List, NamedTuple, Optional, Tuple
from dataclasses import dataclass, field

from .easing import EASE_IN, LINEAR, interpolate_color
from .surface import BlendMode, RenderSurface


# =============================================================================
# Constants
# =============================================================================

REFERENCE_FRAME_RATE = 60.0     # 1x motion scale == 60 Hz
MIN_FRAME_RATE = 1.0            # Guards decay/scale against a stalled clock
LIFE_EPSILON = 1e-9             # Residue below this fraction of a decay step counts as expired

MPH_TO_FT_PER_SEC = 1.46667
WIND_GROUND_HEIGHT = 100.0      # Pixels above ground where wind reaches full strength


RGB = Tuple[int, int, int]
VelocityModifier = Callable[['Particle', float], None]


class ParticleSnapshot(NamedTuple):
    """Render-ready particle state"""
    x: float
    y: float
    radius: float
    color: RGB
    alpha: float
    blend_mode: BlendMode


# =============================================================================
# Particle Class
# =============================================================================

@dataclass
class Particle:
    """Individual flame particle"""
    # Position and velocity
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0

    # Visual properties
    radius: float = 1.0
    start_color: RGB = (255, 255, 0)
    end_color: Optional[RGB] = None
    blend_mode: BlendMode = BlendMode.SRC_OVER

    # Lifetime
    expire_time: float = 1.0    # Seconds from birth to expiry
    life: float = 1.0           # 1.0 at birth, <= 0 when expired

    # Called once per frame before position is integrated
    velocity_modifier: Optional[VelocityModifier] = field(default=None, repr=False)

    def is_alive(self) -> bool:
        return self.life > 0

    def update(self, frame_rate: float) -> None:
        """
        Advance position and age by one frame.

        Args:
            frame_rate: Current frames per second
        """
        frame_rate = max(float(frame_rate), MIN_FRAME_RATE)

        if self.velocity_modifier is not None:
            self.velocity_modifier(self, frame_rate)

        scale = REFERENCE_FRAME_RATE / frame_rate
        self.x += self.vx * scale
        self.y += self.vy * scale

        if self.expire_time <= 0:
            self.life = 0.0
            return
        decay = 1.0 / (self.expire_time * frame_rate)
        self.life -= decay
        # Repeated subtraction leaves rounding residue on the final frame
        if self.life <= decay * LIFE_EPSILON:
            self.life = 0.0

    def color_at(self, life: float) -> RGB:
        """
        Fill color for a given remaining life.

        Fresh particles show the start color and shift toward the end
        color as life runs out.
        """
        if self.end_color is None or tuple(self.start_color) == tuple(self.end_color):
            return tuple(self.start_color)
        return interpolate_color(self.end_color, self.start_color, life, EASE_IN)

    @property
    def color(self) -> RGB:
        return self.color_at(self.alpha)

    @property
    def alpha(self) -> float:
        return float(np.clip(self.life, 0.0, 1.0))

    def render(self, surface: RenderSurface) -> None:
        """Draw the particle; opacity follows remaining life"""
        surface.set_global_alpha(self.alpha)
        surface.set_blend_mode(self.blend_mode)
        surface.set_fill(self.color)
        surface.fill_oval(self.x, self.y, self.radius, self.radius)

    def snapshot(self) -> ParticleSnapshot:
        return ParticleSnapshot(
            x=self.x,
            y=self.y,
            radius=self.radius,
            color=self.color,
            alpha=self.alpha,
            blend_mode=self.blend_mode,
        )


# =============================================================================
# Velocity Modifiers
# =============================================================================

def make_wind_drift(wind_speed: float, ground_y: float) -> VelocityModifier:
    """
    Lateral wind drift that fades out near the ground.

    Each frame the particle's horizontal velocity grows by its own per-frame
    drift plus the wind's per-frame displacement, attenuated linearly from
    zero at ground_y to full strength WIND_GROUND_HEIGHT pixels above it.

    Args:
        wind_speed: Effective wind speed (mph)
        ground_y: Screen y of the ground line (y grows downward)
    """
    wind_ft_per_sec = wind_speed * MPH_TO_FT_PER_SEC

    def drift(particle: Particle, frame_rate: float) -> None:
        wx = wind_ft_per_sec / frame_rate
        dx = particle.vx / frame_rate + wx
        height = ground_y - particle.y
        dx *= LINEAR.interpolate(0.0, 1.0, min(max(height, 0.0) / WIND_GROUND_HEIGHT, 1.0))
        particle.vx += dx

    return drift


# =============================================================================
# Particle Pool
# =============================================================================

class ParticlePool:
    """
    Live particles, owned by the render loop.

    Example:
        pool = ParticlePool()
        for frame in range(frames):
            pool.add_all(emitter.emit(x, y))
            pool.step(60.0, surface)
    """

    def __init__(self):
        self.particles: List[Particle] = []

    def add_all(self, particles: List[Particle]) -> None:
        self.particles.extend(particles)

    def update(self, frame_rate: float) -> int:
        """
        Update every particle and drop the ones that expired.

        Returns:
            Number of particles evicted
        """
        before = len(self.particles)
        for p in self.particles:
            p.update(frame_rate)
        self.particles = [p for p in self.particles if p.is_alive()]
        return before - len(self.particles)

    def render(self, surface: RenderSurface) -> None:
        for p in self.particles:
            p.render(surface)

    def step(self, frame_rate: float, surface: Optional[RenderSurface] = None) -> int:
        """Update, evict and render survivors in a single pass"""
        alive_particles = []
        evicted = 0

        for p in self.particles:
            p.update(frame_rate)
            if not p.is_alive():
                evicted += 1
                continue
            if surface is not None:
                p.render(surface)
            alive_particles.append(p)

        self.particles = alive_particles
        return evicted

    def snapshots(self) -> List[ParticleSnapshot]:
        return [p.snapshot() for p in self.particles]

    def clear(self):
        """Remove all particles"""
        self.particles.clear()

    @property
    def count(self) -> int:
        return len(self.particles)

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

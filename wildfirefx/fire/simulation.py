"""
Flame Simulation Driver

Runs the per-frame loop: emit a batch at the flame base, then update, cull
and render the live particles. Fire behavior updates may arrive from another
thread; they only replace the emitter's configuration snapshot.
"""

from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.particles import ParticlePool, REFERENCE_FRAME_RATE
from ..core.surface import RenderSurface
from .behavior import FireBehaviorSample
from .emitter import FireEmitter


class FrameRateMeter:
    """
    Rolling frame rate from frame timestamps.

    Averages over the last `window` frames; until two timestamps are
    known the default rate is reported.
    """

    def __init__(self, window: int = 100, default_rate: float = REFERENCE_FRAME_RATE):
        if window < 2:
            raise ValueError("Frame rate window must hold at least 2 frames")
        self.default_rate = default_rate
        self._times = deque(maxlen=window)
        self.frame_rate = default_rate

    def tick(self, now_ns: int) -> float:
        """Record a frame timestamp (nanoseconds) and return frames per second"""
        self._times.append(now_ns)
        if len(self._times) < 2:
            return self.frame_rate

        elapsed = self._times[-1] - self._times[0]
        if elapsed <= 0:
            return self.frame_rate

        self.frame_rate = (len(self._times) - 1) * 1_000_000_000.0 / elapsed
        return self.frame_rate

    def reset(self):
        self._times.clear()
        self.frame_rate = self.default_rate


@dataclass(frozen=True)
class SimulationStats:
    """On-screen diagnostic counters"""
    frame_rate: float
    particle_count: int
    flame_length: Optional[float]

    def format_lines(self) -> List[str]:
        lines = [
            f"Current frame rate: {self.frame_rate:.3f}",
            f"Particle count: {self.particle_count}",
        ]
        if self.flame_length is not None:
            lines.append(f"Flame Length: {self.flame_length:.1f}'")
        return lines


class FireSimulation:
    """
    Emitter plus particle pool, advanced once per frame.

    Example:
        sim = FireSimulation(FireEmitter(seed=1))
        sim.apply_fire_behavior(sample)
        surface = ArraySurface(640, 480)
        for _ in range(120):
            surface.clear()
            sim.advance(640, 480, 60.0, surface)
    """

    def __init__(self, emitter: Optional[FireEmitter] = None, origin_margin: float = 10.0):
        self.emitter = emitter or FireEmitter()
        self.pool = ParticlePool()
        self.meter = FrameRateMeter()
        self.origin_margin = origin_margin
        self.frame_rate = REFERENCE_FRAME_RATE
        self.frames = 0

    def apply_fire_behavior(self, sample: FireBehaviorSample) -> bool:
        """
        Reconfigure the emitter for subsequent batches.

        Safe to call from a background thread. Rejected samples leave the
        flame animating with the last good parameters.
        """
        return self.emitter.try_configure(sample)

    def origin_for(self, width: float, height: float) -> Tuple[float, float]:
        """Flame base: horizontal center, just above the bottom edge"""
        return width / 2, height - self.origin_margin

    def advance(
        self,
        width: float,
        height: float,
        frame_rate: float,
        surface: Optional[RenderSurface] = None
    ) -> int:
        """
        Run one frame at a known frame rate.

        Returns:
            Live particle count after the frame
        """
        x, y = self.origin_for(width, height)
        self.pool.add_all(self.emitter.emit(x, y))
        self.pool.step(frame_rate, surface)
        self.frame_rate = frame_rate
        self.frames += 1
        return len(self.pool)

    def tick(
        self,
        now_ns: int,
        width: float,
        height: float,
        surface: Optional[RenderSurface] = None
    ) -> int:
        """Run one frame, measuring the frame rate from the timestamp"""
        return self.advance(width, height, self.meter.tick(now_ns), surface)

    @property
    def stats(self) -> SimulationStats:
        sample = self.emitter.sample
        return SimulationStats(
            frame_rate=self.frame_rate,
            particle_count=len(self.pool),
            flame_length=sample.flame_length if sample is not None else None,
        )

    def reset(self):
        """Drop all live particles and restart the frame clock"""
        self.pool.clear()
        self.meter.reset()
        self.frame_rate = REFERENCE_FRAME_RATE
        self.frames = 0

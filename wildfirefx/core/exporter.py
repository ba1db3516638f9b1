"""
Frame Exporter - Renders the flame headless and exports frames
"""

from PIL import Image
import numpy as np
from pathlib import Path
from typing import List, Tuple

from .surface import ArraySurface


def render_frames(
    simulation,
    frames: int,
    width: int,
    height: int,
    fps: float = 60.0,
    background: Tuple[int, int, int] = (0, 0, 0),
    warmup: int = 0
) -> List[np.ndarray]:
    """
    Run a simulation at a fixed frame rate and capture each frame.

    Args:
        simulation: FireSimulation to advance
        frames: Number of frames to capture
        width, height: Canvas size in pixels
        fps: Simulated frame rate
        background: Clear color
        warmup: Frames to simulate before capturing (lets the flame build up)

    Returns:
        List of HxWx4 uint8 arrays
    """
    for _ in range(warmup):
        simulation.advance(width, height, fps)

    surface = ArraySurface(width, height)
    captured = []
    for _ in range(frames):
        surface.clear(background)
        simulation.advance(width, height, fps, surface)
        captured.append(surface.copy_pixels())
    return captured


class FrameExporter:
    """Exports rendered frames to various formats"""

    @classmethod
    def to_png(cls, frame: np.ndarray, path: str | Path) -> Path:
        """Export a single frame to PNG"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        img = Image.fromarray(frame.astype(np.uint8), 'RGBA')
        img.save(path, 'PNG')

        return path

    @classmethod
    def to_gif(
        cls,
        frames: List[np.ndarray],
        path: str | Path,
        duration: int = 33,
        loop: int = 0
    ) -> Path:
        """
        Export frames to an animated GIF.

        Args:
            duration: Milliseconds per frame
            loop: 0 loops forever
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if not frames:
            raise ValueError("No frames to export")

        images = []
        for frame in frames:
            img = Image.fromarray(frame.astype(np.uint8), 'RGBA')
            img_p = img.convert('RGB').convert('P', palette=Image.Palette.ADAPTIVE, colors=256)
            images.append(img_p)

        images[0].save(
            path,
            save_all=True,
            append_images=images[1:],
            duration=duration,
            loop=loop,
            disposal=2
        )

        return path

    @classmethod
    def to_frames(
        cls,
        frames: List[np.ndarray],
        directory: str | Path,
        prefix: str = "frame"
    ) -> List[Path]:
        """Export frames as individual PNGs"""
        if not frames:
            raise ValueError("No frames to export")

        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        paths = []
        for i, frame in enumerate(frames):
            frame_path = directory / f"{prefix}_{i:04d}.png"
            cls.to_png(frame, frame_path)
            paths.append(frame_path)

        return paths

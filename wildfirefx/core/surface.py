"""
Render Surfaces

The particle renderer only needs a small 2D drawing contract: global alpha,
blend mode, fill color, and filled ovals. RenderSurface describes that
contract; ArraySurface implements it over a numpy RGBA canvas so frames can
be produced headless and exported.
"""

import numpy as np
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Tuple


RGB = Tuple[int, int, int]


class BlendMode(Enum):
    """How a fill is composited onto what is already drawn"""
    SRC_OVER = auto()   # Standard alpha compositing
    ADD = auto()        # Additive (glow)
    MULTIPLY = auto()   # Darken
    SCREEN = auto()     # Lighten


class RenderSurface(ABC):
    """Abstract 2D drawing surface used by particles"""

    @abstractmethod
    def set_global_alpha(self, alpha: float) -> None:
        """Opacity (0-1) applied to subsequent fills"""
        pass

    @abstractmethod
    def set_blend_mode(self, mode: BlendMode) -> None:
        pass

    @abstractmethod
    def set_fill(self, color: RGB) -> None:
        pass

    @abstractmethod
    def fill_oval(self, x: float, y: float, width: float, height: float) -> None:
        """Fill the oval inscribed in the box with top-left corner (x, y)"""
        pass

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        pass

    def clear(self, color: RGB = (0, 0, 0)) -> None:
        """Reset state and paint the whole surface with an opaque color"""
        self.set_global_alpha(1.0)
        self.set_blend_mode(BlendMode.SRC_OVER)
        self.set_fill(color)
        self.fill_rect(0, 0, self.width, self.height)

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass


class ArraySurface(RenderSurface):
    """
    RenderSurface backed by an HxWx4 uint8 numpy array.

    Example:
        surface = ArraySurface(320, 240)
        surface.clear((0, 0, 0))
        surface.set_fill((255, 200, 0))
        surface.fill_oval(100, 100, 20, 20)
        frame = surface.pixels
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._canvas = np.zeros((self._height, self._width, 4), dtype=np.uint8)
        self.alpha = 1.0
        self.blend_mode = BlendMode.SRC_OVER
        self.fill = (255, 255, 255)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pixels(self) -> np.ndarray:
        return self._canvas

    def copy_pixels(self) -> np.ndarray:
        return self._canvas.copy()

    def set_global_alpha(self, alpha: float) -> None:
        self.alpha = float(np.clip(alpha, 0.0, 1.0))

    def set_blend_mode(self, mode: BlendMode) -> None:
        self.blend_mode = mode

    def set_fill(self, color: RGB) -> None:
        self.fill = tuple(int(np.clip(c, 0, 255)) for c in color[:3])

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        x0, y0, x1, y1 = self._clip_box(x, y, width, height)
        if x0 >= x1 or y0 >= y1:
            return
        mask = np.ones((y1 - y0, x1 - x0), dtype=bool)
        self._blend(x0, y0, mask)

    def fill_oval(self, x: float, y: float, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            return
        x0, y0, x1, y1 = self._clip_box(x, y, width, height)
        if x0 >= x1 or y0 >= y1:
            return

        # Pixel centers inside the ellipse
        cx = x + width / 2
        cy = y + height / 2
        rx = width / 2
        ry = height / 2
        ys, xs = np.mgrid[y0:y1, x0:x1].astype(np.float32)
        dx = (xs + 0.5 - cx) / rx
        dy = (ys + 0.5 - cy) / ry
        mask = dx * dx + dy * dy <= 1.0

        if mask.any():
            self._blend(x0, y0, mask)

    def _clip_box(self, x: float, y: float, width: float, height: float) -> Tuple[int, int, int, int]:
        x0 = max(0, int(np.floor(x)))
        y0 = max(0, int(np.floor(y)))
        x1 = min(self._width, int(np.ceil(x + width)))
        y1 = min(self._height, int(np.ceil(y + height)))
        return x0, y0, x1, y1

    def _blend(self, x0: int, y0: int, mask: np.ndarray) -> None:
        """Composite the current fill over the masked region"""
        if self.alpha <= 0:
            return

        h, w = mask.shape
        region = self._canvas[y0:y0 + h, x0:x0 + w]
        dst = region[..., :3].astype(np.float32)
        src = np.array(self.fill, dtype=np.float32)
        a = self.alpha

        if self.blend_mode == BlendMode.ADD:
            out = dst + src * a
        elif self.blend_mode == BlendMode.MULTIPLY:
            out = dst * (1 - a + a * src / 255.0)
        elif self.blend_mode == BlendMode.SCREEN:
            screened = 255.0 - (255.0 - dst) * (255.0 - src) / 255.0
            out = dst + (screened - dst) * a
        else:
            out = src * a + dst * (1 - a)

        out = np.clip(out, 0, 255).astype(np.uint8)
        region[..., :3][mask] = out[mask]

        # Coverage accumulates like SRC_OVER for every mode
        dst_a = region[..., 3].astype(np.float32) / 255.0
        out_a = a + dst_a * (1 - a)
        region[..., 3][mask] = np.clip(out_a * 255.0 + 0.5, 0, 255).astype(np.uint8)[mask]

    def to_image(self):
        """Convert the canvas to a PIL RGBA image"""
        from PIL import Image
        return Image.fromarray(self._canvas, 'RGBA')

"""
Utility functions for color handling
"""

from typing import Sequence, Tuple, Union

from PIL import ImageColor


RGB = Tuple[int, int, int]


class ColorUtils:
    """Color parsing and formatting utilities"""

    @classmethod
    def parse(cls, value: Union[str, Sequence[int]]) -> RGB:
        """
        Parse a color given as a CSS name, hex string, "r,g,b" string or sequence.

        Examples:
            ColorUtils.parse('yellow')     -> (255, 255, 0)
            ColorUtils.parse('#f80')       -> (255, 136, 0)
            ColorUtils.parse('255,100,0')  -> (255, 100, 0)

        Raises:
            ValueError: If the color cannot be parsed
        """
        if isinstance(value, str):
            text = value.strip()
            if ',' not in text or text.endswith(')'):
                try:
                    return tuple(ImageColor.getrgb(text)[:3])
                except ValueError:
                    raise ValueError(
                        f"Unknown color '{value}'. Use a CSS color name, #rrggbb or r,g,b"
                    ) from None
            parts = text.split(',')
        else:
            parts = list(value)

        if len(parts) != 3:
            raise ValueError(f"Color needs 3 components, got {value!r}")
        try:
            rgb = tuple(int(p) for p in parts)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid color components: {value!r}") from None
        if any(c < 0 or c > 255 for c in rgb):
            raise ValueError(f"Color components must be 0-255, got {value!r}")
        return rgb

    @staticmethod
    def hex_to_rgb(text: str) -> RGB:
        """Convert '#rgb' or '#rrggbb' to an RGB tuple"""
        if not text.startswith('#'):
            text = '#' + text
        try:
            return tuple(ImageColor.getrgb(text)[:3])
        except ValueError:
            raise ValueError(f"Invalid hex color: {text}") from None

    @staticmethod
    def rgb_to_hex(rgb: RGB) -> str:
        return '#{:02x}{:02x}{:02x}'.format(*rgb)

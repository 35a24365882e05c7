"""Hex color parsing for stroke colors."""

import re

# Normalized (r, g, b), each channel in [0, 1]
RGB = tuple[float, float, float]

BLACK: RGB = (0.0, 0.0, 0.0)
WHITE: RGB = (1.0, 1.0, 1.0)

_HEX_RGB = re.compile(r"[0-9a-fA-F]{6}")


def resolve_color(hex_color: str) -> RGB:
    """Parse ``#RRGGBB`` or ``RRGGBB`` into normalized RGB.

    Malformed input resolves to black instead of raising, so one bad
    stroke color never aborts a tile render.
    """
    digits = hex_color[1:] if hex_color.startswith("#") else hex_color
    if not _HEX_RGB.fullmatch(digits):
        return BLACK
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    return (r / 255, g / 255, b / 255)


def to_rgb255(rgb: RGB) -> tuple[int, int, int]:
    """Convert normalized RGB to 8-bit channels for Pillow."""
    r, g, b = (round(channel * 255) for channel in rgb)
    return (r, g, b)

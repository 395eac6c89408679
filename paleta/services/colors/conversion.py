"""
Color-space conversions shared by extraction, harmony and export.

All values are integers on the scales used throughout Paleta:
RGB channels 0-255, hue 0-360 degrees, saturation and lightness 0-100 percent.
Rounding is half-up so that x.5 always rounds toward +infinity.
"""

import math
import re
from typing import Sequence, Tuple

HEX_COLOR_PATTERN = re.compile(r"#[0-9a-fA-F]{6}")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity."""
    return int(math.floor(value + 0.5))


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[int, int, int]:
    """
    Convert RGB channels to HSL.

    Args:
        r: Red component (0-255)
        g: Green component (0-255)
        b: Blue component (0-255)

    Returns:
        Tuple of (h, s, l) with h in [0, 360], s and l in [0, 100]
    """
    rf, gf, bf = r / 255.0, g / 255.0, b / 255.0

    c_max = max(rf, gf, bf)
    c_min = min(rf, gf, bf)
    h = 0.0
    s = 0.0
    l = (c_max + c_min) / 2

    if c_max != c_min:
        d = c_max - c_min
        s = d / (2 - c_max - c_min) if l > 0.5 else d / (c_max + c_min)

        if c_max == rf:
            h = ((gf - bf) / d + (6 if gf < bf else 0)) / 6
        elif c_max == gf:
            h = ((bf - rf) / d + 2) / 6
        else:
            h = ((rf - gf) / d + 4) / 6

    return round_half_up(h * 360), round_half_up(s * 100), round_half_up(l * 100)


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """
    Convert HSL to RGB channels.

    Args:
        h: Hue in degrees [0, 360)
        s: Saturation percent [0, 100]
        l: Lightness percent [0, 100]

    Returns:
        Tuple of (r, g, b) with values 0-255
    """
    hf = h / 360.0
    sf = s / 100.0
    lf = l / 100.0

    if sf == 0:
        r = g = b = lf
    else:
        q = lf * (1 + sf) if lf < 0.5 else lf + sf - lf * sf
        p = 2 * lf - q
        r = _hue_to_channel(p, q, hf + 1 / 3)
        g = _hue_to_channel(p, q, hf)
        b = _hue_to_channel(p, q, hf - 1 / 3)

    return round_half_up(r * 255), round_half_up(g * 255), round_half_up(b * 255)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB channels to a lowercase #rrggbb string."""
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert hex color string to RGB tuple.

    Args:
        hex_color: Color in format #RRGGBB (either case)

    Returns:
        RGB tuple (r, g, b) with values 0-255

    Raises:
        ValueError: If the string is not a #RRGGBB color
    """
    if not isinstance(hex_color, str) or not HEX_COLOR_PATTERN.fullmatch(hex_color):
        raise ValueError(f"Invalid hex color format: {hex_color}")

    return tuple(int(hex_color[i:i + 2], 16) for i in (1, 3, 5))


def color_distance(color1: Sequence[float], color2: Sequence[float]) -> float:
    """Euclidean distance between two RGB triples."""
    return math.sqrt(
        (float(color1[0]) - float(color2[0])) ** 2
        + (float(color1[1]) - float(color2[1])) ** 2
        + (float(color1[2]) - float(color2[2])) ** 2
    )

"""
Palette assembly for Paleta.

Coordinates harmony generation across every base color, tint/shade
variations, and re-sampling a base color from a new image coordinate.
"""

from typing import List, Optional, Sequence, Union

import numpy as np

from paleta.config import config
from paleta.schemas import Color, HarmonyMode, Palette
from ..observability import performance_tracked
from .harmony import generate_harmony_ring
from .sampling import composite_over_white, validate_image_array


@performance_tracked("palette_build")
def build_palette(base_colors: Sequence[Color], ring_count: Optional[int] = None,
                  mode: Union[HarmonyMode, str, None] = None) -> Palette:
    """
    Expand every base color into its harmony ring.

    Args:
        base_colors: Dominant colors in extraction order
        ring_count: Ring size per base color, expected in [3, 12];
            defaults to PALETA_DEFAULT_RINGS
        mode: Harmony rule shared by every ring, defaults to PALETA_DEFAULT_MODE

    Returns:
        Palette whose `colors` lists the base colors followed by each ring
    """
    ring_count = config.DEFAULT_RINGS if ring_count is None else ring_count
    mode = HarmonyMode(config.DEFAULT_MODE if mode is None else mode)
    rings = [generate_harmony_ring(base, ring_count, mode) for base in base_colors]
    return Palette(
        base_colors=list(base_colors),
        ring_count=ring_count,
        mode=mode,
        rings=rings
    )


def replace_base_color(palette: Palette, index: int, color: Color) -> Palette:
    """
    Swap one base color and regenerate every ring.

    Raises:
        IndexError: If index does not address a base color
    """
    if not 0 <= index < len(palette.base_colors):
        raise IndexError(f"Base color index {index} out of range")

    base_colors = list(palette.base_colors)
    base_colors[index] = color
    return build_palette(base_colors, palette.ring_count, palette.mode)


def generate_color_variations(base: Color, count: int = 5) -> List[Color]:
    """
    Lighter tints, the base color, then darker shades.

    Lightness moves in steps of 15 points, capped at 95 for tints and 5 for
    shades; hue and saturation are kept.
    """
    steps = count // 2
    tints = [Color.from_hsl(base.h, base.s, min(95, base.l + i * 15)) for i in range(1, steps + 1)]
    shades = [Color.from_hsl(base.h, base.s, max(5, base.l - i * 15)) for i in range(1, steps + 1)]
    return tints + [base] + shades


def sample_color_at(image: np.ndarray, x: float, y: float) -> Color:
    """
    Color of the pixel under an image coordinate.

    Coordinates are truncated to pixel indices and clamped into the image;
    translucent pixels are read as composited over white;
    the returned color is positioned at the clamped pixel.

    Raises:
        ValueError: If the image has no pixels
    """
    image = validate_image_array(image)
    height, width = image.shape[0], image.shape[1]
    if width == 0 or height == 0:
        raise ValueError("Cannot sample a color from an empty image")

    px = min(max(int(x), 0), width - 1)
    py = min(max(int(y), 0), height - 1)
    r, g, b = (int(c) for c in composite_over_white(image[py, px]))
    return Color.from_rgb(r, g, b).with_position(px, py)

"""
Paleta Color Harmony Engine

This module implements the color theory rules that expand one base color into
a ring of related colors: complementary, analogous, triadic, tetradic and
split-complementary. Every generator is pure and deterministic.
"""

import math
from typing import Callable, Dict, List, Tuple, Union

from paleta.config import config
from paleta.schemas import Color, HarmonyMode

# Hue offsets (degrees) cycled through by the banded modes
TRIADIC_OFFSETS = (0, 120, 240)
TETRADIC_OFFSETS = (0, 90, 180, 270)
SPLIT_COMPLEMENTARY_OFFSETS = (0, 150, 210)

# Total lightness spread of the banded modes and their downward shift
BAND_SPREAD = 40
BAND_SHIFT = -20


def rotate_hue(h: float, degrees: float) -> float:
    """
    Rotate hue by specified degrees.

    Args:
        h: Original hue in degrees
        degrees: Rotation in degrees (can be negative)

    Returns:
        Rotated hue in [0, 360)
    """
    return (h + degrees + 360) % 360


def clamp_lightness(l: float) -> float:
    """Clamp lightness into the band that avoids near-black and near-white."""
    return max(config.LIGHTNESS_FLOOR, min(config.LIGHTNESS_CEIL, l))


def ring_color(base: Color, hue_offset: float, lightness_offset: float) -> Color:
    """Base color with hue rotated and lightness shifted, saturation kept."""
    return Color.from_hsl(
        rotate_hue(base.h, hue_offset),
        base.s,
        clamp_lightness(base.l + lightness_offset)
    )


def complementary_offsets(i: int, n: int) -> Tuple[float, float]:
    """Opposite hue; lightness spread linearly over 60 points around the base."""
    return 180, (i - n / 2) * (60 / n)


def analogous_offsets(i: int, n: int) -> Tuple[float, float]:
    """Hue swept across +/-30 degrees; lightness alternating by parity."""
    return (i - n / 2) * 60 / n, (10 if i % 2 == 0 else -10)


def _banded(hue_offsets: Tuple[int, ...]) -> Callable[[int, int], Tuple[float, float]]:
    cycle = len(hue_offsets)

    def offsets(i: int, n: int) -> Tuple[float, float]:
        band = i // cycle
        step = BAND_SPREAD / math.ceil(n / cycle)
        return hue_offsets[i % cycle], band * step + BAND_SHIFT

    return offsets


OFFSET_RULES: Dict[HarmonyMode, Callable[[int, int], Tuple[float, float]]] = {
    HarmonyMode.COMPLEMENTARY: complementary_offsets,
    HarmonyMode.ANALOGOUS: analogous_offsets,
    HarmonyMode.TRIADIC: _banded(TRIADIC_OFFSETS),
    HarmonyMode.TETRADIC: _banded(TETRADIC_OFFSETS),
    HarmonyMode.SPLIT_COMPLEMENTARY: _banded(SPLIT_COMPLEMENTARY_OFFSETS),
}


def generate_harmony_ring(base: Color, ring_count: int,
                          mode: Union[HarmonyMode, str] = HarmonyMode.COMPLEMENTARY) -> List[Color]:
    """
    Generate the harmony ring for a base color.

    Args:
        base: Color to expand
        ring_count: Number of ring colors, expected in [3, 12]
        mode: Harmony rule, as a HarmonyMode or its string value

    Returns:
        Exactly ring_count colors in ring order; HSL and hex are re-derived
        from the converted RGB of each entry

    Raises:
        ValueError: If mode is not a known harmony mode
    """
    rule = OFFSET_RULES[HarmonyMode(mode)]

    ring = []
    for i in range(ring_count):
        hue_offset, lightness_offset = rule(i, ring_count)
        ring.append(ring_color(base, hue_offset, lightness_offset))

    return ring[:ring_count]

"""
Unit tests for palette assembly.

Tests:
- base colors followed by rings in order
- replacing a base color regenerates rings
- tint/shade variations
- sampling a color under an image coordinate
"""

import numpy as np
import pytest

from paleta.config import config
from paleta.schemas import Color, HarmonyMode, Position
from paleta.services.colors.harmony import generate_harmony_ring
from paleta.services.colors.palette import (
    build_palette, replace_base_color, generate_color_variations, sample_color_at
)
from paleta.services.observability import get_metrics_collector

RED = Color.from_rgb(255, 0, 0)
BLUE = Color.from_rgb(0, 0, 255)
GREEN = Color.from_rgb(0, 255, 0)


class TestBuildPalette:
    """Test palette construction"""

    def test_order_base_then_rings(self):
        palette = build_palette([RED, BLUE], 4, "triadic")

        assert palette.mode == HarmonyMode.TRIADIC
        assert len(palette.colors) == 2 * (4 + 1)
        assert palette.colors[:2] == [RED, BLUE]
        assert palette.colors[2:6] == generate_harmony_ring(RED, 4, HarmonyMode.TRIADIC)
        assert palette.colors[6:] == generate_harmony_ring(BLUE, 4, HarmonyMode.TRIADIC)

    def test_defaults_from_config(self):
        palette = build_palette([RED])
        assert palette.ring_count == config.DEFAULT_RINGS
        assert palette.mode == HarmonyMode(config.DEFAULT_MODE)
        assert len(palette.rings[0]) == config.DEFAULT_RINGS

    def test_duplicates_allowed(self):
        palette = build_palette([RED, RED], 3, HarmonyMode.COMPLEMENTARY)
        assert palette.rings[0] == palette.rings[1]
        assert len(palette.hex_codes) == 8

    def test_build_is_tracked(self):
        build_palette([RED], 3)
        assert get_metrics_collector().get_operation_stats("palette_build")["total_calls"] == 1


class TestReplaceBaseColor:
    """Test base color replacement"""

    def test_replace_regenerates_ring(self):
        palette = build_palette([RED, BLUE], 5, HarmonyMode.ANALOGOUS)
        updated = replace_base_color(palette, 1, GREEN)

        assert updated.base_colors == [RED, GREEN]
        assert updated.rings[0] == palette.rings[0]
        assert updated.rings[1] == generate_harmony_ring(GREEN, 5, HarmonyMode.ANALOGOUS)
        assert palette.base_colors == [RED, BLUE]

    def test_replace_out_of_range(self):
        palette = build_palette([RED], 3)
        with pytest.raises(IndexError):
            replace_base_color(palette, 1, GREEN)


class TestColorVariations:
    """Test tint and shade generation"""

    def test_variations_layout(self):
        variations = generate_color_variations(RED, 5)

        assert len(variations) == 5
        assert variations[2] == RED
        lightness = [c.l for c in variations]
        assert lightness[0] == pytest.approx(65, abs=1)
        assert lightness[1] == pytest.approx(80, abs=1)
        assert lightness[3] == pytest.approx(35, abs=1)
        assert lightness[4] == pytest.approx(20, abs=1)

    def test_variations_are_capped(self):
        light = Color.from_rgb(240, 240, 240)
        dark = Color.from_rgb(15, 15, 15)
        assert all(c.l <= 95 for c in generate_color_variations(light, 7))
        assert all(c.l >= 5 for c in generate_color_variations(dark, 7))


class TestSampleColorAt:
    """Test picking a color under an image coordinate"""

    @pytest.fixture
    def image(self):
        img = np.zeros((4, 4, 4), dtype=np.uint8)
        img[1, 2] = (10, 20, 30, 255)
        img[0, 3] = (200, 100, 50, 255)
        return img

    def test_sample_exact_pixel(self, image):
        color = sample_color_at(image, 2, 1)
        assert color.rgb == (10, 20, 30)
        assert color.position == Position(x=2, y=1)

    def test_sample_clamps_coordinates(self, image):
        color = sample_color_at(image, 10, -3)
        assert color.rgb == (200, 100, 50)
        assert color.position == Position(x=3, y=0)

    def test_sample_translucent_pixel_over_white(self, image):
        color = sample_color_at(image, 0, 0)
        assert color.rgb == (255, 255, 255)

        img = np.zeros((1, 1, 4), dtype=np.uint8)
        img[0, 0] = (0, 0, 255, 128)
        assert sample_color_at(img, 0, 0).rgb == (127, 127, 255)

    def test_sample_empty_image(self):
        with pytest.raises(ValueError):
            sample_color_at(np.zeros((0, 0, 4), dtype=np.uint8), 0, 0)

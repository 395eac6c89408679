"""
Unit tests for the color extraction module.

Tests the extraction pipeline components:
- strided pixel sampling with source positions
- distinct-centroid seeding and fixed-length k-means
- the minimum separation pass
- representative position resolution
- end-to-end extraction including the empty-image fallback
"""

import itertools

import numpy as np
import pytest

from paleta.config import config
from paleta.schemas import Position
from paleta.services.colors.clustering import (
    assign_to_nearest, pairwise_distances, seed_distinct_centroids, update_centroids, run_kmeans
)
from paleta.services.colors.conversion import color_distance
from paleta.services.colors.distinct import (
    ensure_distinct_colors, frequent_colors, nudge_color, find_distinct_replacement
)
from paleta.services.colors.extraction import extract_dominant_colors, fallback_colors
from paleta.services.colors.positions import resolve_positions, default_position
from paleta.services.colors.sampling import (
    composite_over_white, sample_pixels, effective_stride, image_from_rgba_bytes,
    validate_image_array
)
from paleta.services.observability import get_metrics_collector

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


class TestPixelSampling:
    """Test strided pixel sampling"""

    def test_sample_positions_row_major(self):
        """Samples follow rows then columns on the stride grid"""
        img = np.zeros((8, 8, 4), dtype=np.uint8)
        img[..., 3] = 255
        img[4, 4, :3] = (9, 8, 7)

        sample = sample_pixels(img, stride=4, min_samples=1)

        assert sample.count == 4
        np.testing.assert_array_equal(sample.positions, [[0, 0], [4, 0], [0, 4], [4, 4]])
        np.testing.assert_array_equal(sample.pixels[3], [9, 8, 7])

    def test_sample_composites_alpha_over_white(self):
        """Transparent pixels read as white, translucent ones blend toward it"""
        img = np.zeros((2, 2, 4), dtype=np.uint8)
        img[0, 0] = (255, 0, 0, 255)
        img[0, 1] = (255, 0, 0, 128)
        img[1, 0] = (0, 0, 0, 0)
        img[1, 1] = (10, 20, 30, 255)

        sample = sample_pixels(img, stride=1)

        assert sample.pixels.shape == (4, 3)
        assert [tuple(p) for p in sample.pixels] == [
            (255, 0, 0), (255, 127, 127), (255, 255, 255), (10, 20, 30)
        ]

    def test_composite_leaves_rgb_untouched(self):
        img = np.full((2, 2, 3), 77, dtype=np.uint8)
        np.testing.assert_array_equal(composite_over_white(img), img)

    def test_fixed_stride_when_min_samples_is_one(self, monkeypatch):
        """PALETA_MIN_SAMPLES=1 keeps the configured stride for every image size"""
        monkeypatch.setattr(config, "MIN_SAMPLES", 1)
        img = np.zeros((16, 16, 3), dtype=np.uint8)

        assert sample_pixels(img).stride == 4
        assert sample_pixels(img).count == 16
        assert sample_pixels(img[:4, :4]).count == 1
        assert effective_stride(4, 4, 4, 1) == 4

    def test_effective_stride(self):
        """Small images fall back toward sampling every pixel"""
        assert effective_stride(400, 400, 4, 64) == 4
        assert effective_stride(4, 4, 4, 64) == 1
        assert effective_stride(10, 10, 4, 16) == 3

    def test_empty_image_sample(self):
        sample = sample_pixels(np.zeros((0, 0, 4), dtype=np.uint8))
        assert sample.is_empty
        assert sample.positions.shape == (0, 2)

    def test_image_from_rgba_bytes(self):
        data = bytes(range(24))
        img = image_from_rgba_bytes(data, width=3, height=2)
        assert img.shape == (2, 3, 4)
        np.testing.assert_array_equal(img[1, 0], [12, 13, 14, 15])

    def test_image_from_rgba_bytes_length_mismatch(self):
        with pytest.raises(ValueError):
            image_from_rgba_bytes(bytes(10), width=3, height=2)

    def test_validate_image_array_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            validate_image_array(np.zeros((4, 4), dtype=np.uint8))
        with pytest.raises(ValueError):
            validate_image_array(np.zeros((4, 4, 2), dtype=np.uint8))


class TestClustering:
    """Test seeding and k-means"""

    @pytest.fixture
    def red_blue_pixels(self):
        return np.array([RED] * 8 + [BLUE] * 8, dtype=np.int64)

    def test_assignment_ties_pick_lowest_index(self):
        pixels = np.array([[10, 0, 0]])
        centroids = np.array([[0, 0, 0], [20, 0, 0]])
        assert assign_to_nearest(pixels, centroids)[0] == 0

    def test_pairwise_distances_match_direct_difference(self):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 256, size=(200, 3))
        centroids = rng.integers(0, 256, size=(6, 3))

        direct = np.sqrt(((pixels[:, None, :] - centroids[None, :, :]) ** 2).sum(axis=2))

        np.testing.assert_allclose(pairwise_distances(pixels, centroids), direct, atol=1e-9)
        np.testing.assert_array_equal(assign_to_nearest(pixels, centroids), direct.argmin(axis=1))

    def test_equidistant_centroids_tie_exactly(self):
        pixels = np.array([[128, 64, 200]])
        centroids = np.array([[118, 64, 200], [138, 64, 200], [128, 54, 200]])
        distances = pairwise_distances(pixels, centroids)
        assert distances[0, 0] == distances[0, 1] == distances[0, 2] == 10.0
        assert assign_to_nearest(pixels, centroids)[0] == 0

    def test_seeding_picks_distinct_colors(self, red_blue_pixels):
        rng = np.random.default_rng(0)
        centroids = seed_distinct_centroids(red_blue_pixels, 2, rng)
        assert {tuple(c) for c in centroids} == {RED, BLUE}

    def test_seeding_single_color(self):
        pixels = np.array([GREEN] * 10, dtype=np.int64)
        centroids = seed_distinct_centroids(pixels, 3, np.random.default_rng(0))
        assert centroids.shape == (3, 3)
        assert all(tuple(c) == GREEN for c in centroids)

    def test_update_rounds_mean_and_reseeds_empty(self):
        pixels = np.array([[0, 0, 0], [1, 1, 1]], dtype=np.int64)
        labels = np.array([0, 0])
        centroids, reseeded = update_centroids(pixels, labels, 2, np.random.default_rng(0))
        np.testing.assert_array_equal(centroids[0], [1, 1, 1])  # 0.5 rounds up
        assert reseeded == 1
        assert any((centroids[1] == p).all() for p in pixels)

    def test_kmeans_homogeneous_clusters(self, red_blue_pixels):
        result = run_kmeans(red_blue_pixels, 2, np.random.default_rng(5))

        assert result.iterations == 15
        assert {tuple(c) for c in result.centroids} == {RED, BLUE}
        for pixel, label in zip(red_blue_pixels, result.labels):
            np.testing.assert_array_equal(result.centroids[label], pixel)

    def test_kmeans_from_initial_centroids(self, red_blue_pixels):
        result = run_kmeans(red_blue_pixels, 2, np.random.default_rng(0),
                            iterations=1, initial_centroids=[[250, 0, 0], [0, 0, 250]])
        np.testing.assert_array_equal(result.centroids, [RED, BLUE])
        assert result.labels.tolist() == [0] * 8 + [1] * 8


class TestDistinctness:
    """Test the minimum separation pass"""

    def test_distinct_centroids_unchanged(self):
        centroids = np.array([RED, BLUE])
        pixels = np.array([RED, BLUE], dtype=np.int64)
        np.testing.assert_array_equal(ensure_distinct_colors(centroids, pixels, 60), [RED, BLUE])

    def test_near_duplicate_replaced_by_frequent_color(self):
        pixels = np.array([RED] * 50 + [GREEN] * 50, dtype=np.int64)
        centroids = np.array([RED, (250, 5, 5)])

        result = ensure_distinct_colors(centroids, pixels, 60)

        np.testing.assert_array_equal(result, [RED, GREEN])

    def test_nudge_when_no_replacement(self):
        pixels = np.array([RED] * 20, dtype=np.int64)
        result = ensure_distinct_colors(np.array([RED, RED]), pixels, 60)
        np.testing.assert_array_equal(result, [RED, (255, 30, 30)])

    def test_nudge_clamps_channels(self):
        assert nudge_color((250, 0, 100)) == (255, 30, 130)

    def test_frequent_colors_order(self):
        """Counts over every 10th pixel, most common first, first seen on ties"""
        pixels = np.array([BLUE] * 20 + [RED] * 40 + [GREEN] * 20, dtype=np.int64)
        assert frequent_colors(pixels) == [RED, BLUE, GREEN]

    def test_frequent_colors_scan_limit(self):
        pixels = np.array([RED] * 1000 + [GREEN] * 500, dtype=np.int64)
        assert frequent_colors(pixels) == [RED]

    def test_replacement_none_when_all_close(self):
        pixels = np.array([RED] * 30, dtype=np.int64)
        assert find_distinct_replacement([(250, 10, 10)], pixels, 60) is None


class TestPositions:
    """Test representative position resolution"""

    def test_closest_member_wins(self):
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[0, 0] = (200, 0, 0)
        img[0, 1] = (255, 0, 0)
        img[1, 0] = (0, 0, 250)
        img[1, 1] = (0, 0, 255)
        sample = sample_pixels(img, stride=1)
        labels = np.array([0, 0, 1, 1])

        positions = resolve_positions(np.array([RED, BLUE]), sample, labels)

        assert positions == [(1, 0), (1, 1)]

    def test_empty_cluster_uses_default_position(self):
        img = np.zeros((4, 4, 3), dtype=np.uint8)
        sample = sample_pixels(img, stride=1)
        labels = np.zeros(16, dtype=np.int64)

        positions = resolve_positions(np.array([(0, 0, 0), RED]), sample, labels)

        assert positions[0] == (0, 0)
        assert positions[1] == default_position(1, 2, 4, 4) == (3, 2)


class TestExtractDominantColors:
    """End-to-end extraction tests"""

    def test_red_blue_scenario(self, red_blue_image):
        """Two homogeneous halves give back the pure inputs"""
        colors = extract_dominant_colors(red_blue_image, 2, rng_seed=1)

        assert len(colors) == 2
        by_rgb = {c.rgb: c for c in colors}
        assert set(by_rgb) == {RED, BLUE}
        assert by_rgb[RED].position.x < 2
        assert by_rgb[BLUE].position.x >= 2

    def test_empty_image_fallback(self):
        colors = extract_dominant_colors(np.zeros((0, 0, 4), dtype=np.uint8), 5)

        assert len(colors) == 5
        for color in colors:
            assert color.hex == "#808080"
            assert (color.h, color.s, color.l) == (0, 0, 50)
            assert color.position == Position(x=0, y=0)

    def test_zero_width_fallback_centered(self):
        colors = extract_dominant_colors(np.zeros((10, 0, 4), dtype=np.uint8), 2)
        assert [c.position for c in colors] == [Position(x=0, y=5)] * 2

    def test_fallback_colors_midpoint(self):
        colors = fallback_colors(3, 7, 4)
        assert all(c.position == Position(x=3.5, y=2) for c in colors)

    def test_single_color_image_cardinality(self):
        img = np.zeros((20, 20, 4), dtype=np.uint8)
        img[..., 1] = 255
        img[..., 3] = 255

        colors = extract_dominant_colors(img, 3, rng_seed=0)

        assert len(colors) == 3
        assert colors[0].hex == "#00ff00"

    def test_well_separated_colors_are_distinct(self, striped_image):
        colors = extract_dominant_colors(striped_image, 3, rng_seed=3)

        assert len(colors) == 3
        assert len({c.hex for c in colors}) == 3
        for a, b in itertools.combinations(colors, 2):
            assert color_distance(a.rgb, b.rgb) >= 60

    @pytest.mark.parametrize("k", [1, 2, 5, 8])
    def test_cardinality_on_noise(self, k):
        img = np.random.default_rng(11).integers(0, 256, size=(32, 48, 4), dtype=np.uint8)
        colors = extract_dominant_colors(img, k, rng_seed=4)
        assert len(colors) == k
        for color in colors:
            assert 0 <= color.position.x < 48
            assert 0 <= color.position.y < 32

    def test_seeded_runs_are_reproducible(self):
        img = np.random.default_rng(2).integers(0, 256, size=(40, 40, 3), dtype=np.uint8)
        first = extract_dominant_colors(img, 5, rng_seed=99)
        second = extract_dominant_colors(img, 5, rng_seed=99)
        assert first == second

    def test_transparent_background_reads_as_white(self):
        img = np.zeros((40, 40, 4), dtype=np.uint8)
        img[:, :20] = (255, 0, 0, 255)

        colors = extract_dominant_colors(img, 2, rng_seed=1)

        assert {c.hex for c in colors} == {"#ff0000", "#ffffff"}

    def test_extract_from_rgba_bytes(self, red_blue_image):
        img = image_from_rgba_bytes(red_blue_image.tobytes(), width=4, height=4)
        colors = extract_dominant_colors(img, 2, rng_seed=1)
        assert {c.rgb for c in colors} == {RED, BLUE}

    def test_invalid_image_shape(self):
        with pytest.raises(ValueError):
            extract_dominant_colors(np.zeros((4, 4), dtype=np.uint8), 2)

    def test_stages_recorded_in_metrics(self, red_blue_image):
        extract_dominant_colors(red_blue_image, 2, rng_seed=1)
        collector = get_metrics_collector()
        for stage in ("sampling", "clustering", "distinctness", "positions"):
            assert collector.get_operation_stats(stage)["total_calls"] == 1

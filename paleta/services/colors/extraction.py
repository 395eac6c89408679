"""
Dominant color extraction service.

This module implements the extraction pipeline for Paleta: strided pixel
sampling, distinct-centroid seeding, fixed-length k-means, the minimum
separation pass and representative position resolution.
"""

from typing import List, Optional

import numpy as np

from paleta.config import config
from paleta.schemas import Color, Position
from paleta.utils.logging import get_logger
from ..observability import ExtractionLogger
from .clustering import run_kmeans
from .distinct import ensure_distinct_colors
from .positions import resolve_positions
from .sampling import sample_pixels, validate_image_array


def fallback_colors(k: int, width: int, height: int) -> List[Color]:
    """Neutral gray placeholders centered on the image midpoint."""
    r, g, b = config.FALLBACK_GRAY
    center = Position(x=width / 2, y=height / 2)
    return [Color.from_rgb(r, g, b, position=center) for _ in range(k)]


def extract_dominant_colors(image: np.ndarray, k: Optional[int] = None, *,
                            rng_seed: Optional[int] = None,
                            stride: Optional[int] = None) -> List[Color]:
    """
    Extract k dominant, visually distinct colors from a decoded image.

    Args:
        image: Pixel array of shape (height, width, 3|4), channels 0-255.
            Alpha is ignored.
        k: Number of colors to return (>= 1), defaults to PALETA_DEFAULT_COLORS
        rng_seed: Seed for centroid seeding and empty-cluster recovery.
            None draws fresh entropy, so repeated runs may differ.
        stride: Sampling step override, defaults to PALETA_SAMPLE_STRIDE

    Returns:
        Exactly k colors, each with a representative source position

    Raises:
        ValueError: If the array is not shaped like an RGB/RGBA image
    """
    log = get_logger("extraction")
    k = config.DEFAULT_COLORS if k is None else k

    image = validate_image_array(image)
    height, width = int(image.shape[0]), int(image.shape[1])
    trace = ExtractionLogger(image_size=(width, height))

    with trace.stage("sampling") as info:
        sample = sample_pixels(image, stride=stride)
        info['pixel_count'] = sample.count
        info['stride'] = sample.stride

    if sample.is_empty:
        trace.log_warning(f"No pixels sampled from {width}x{height} image; returning neutral fallback")
        trace.finish(cluster_count=k, fallback_used=True)
        return fallback_colors(k, width, height)

    rng = np.random.default_rng(rng_seed)

    with trace.stage("clustering", pixel_count=sample.count, cluster_count=k):
        result = run_kmeans(sample.pixels, k, rng)

    with trace.stage("distinctness", cluster_count=k):
        centroids = ensure_distinct_colors(result.centroids, sample.pixels)

    with trace.stage("positions", cluster_count=k):
        positions = resolve_positions(centroids, sample, result.labels)

    colors = [
        Color.from_rgb(rgb[0], rgb[1], rgb[2], position=Position(x=pos[0], y=pos[1]))
        for rgb, pos in zip(centroids[:k], positions)
    ]

    if len(colors) < k:
        trace.log_warning(f"Extraction produced {len(colors)} of {k} colors; padding with neutral gray")
        colors.extend(fallback_colors(k - len(colors), width, height))

    metrics = trace.finish(cluster_count=len(colors))
    log.info("Dominant colors extracted", extra={
        "extraction_id": metrics.extraction_id,
        "colors": [c.hex for c in colors],
        "sampled_pixels": sample.count,
        "duration_ms": round(metrics.total_duration_ms, 1)
    })

    return colors

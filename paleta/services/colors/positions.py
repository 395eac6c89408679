"""
Representative source positions for extracted colors.

Each color is anchored at the sampled pixel of its cluster that is closest to
the final color. Used by UI layers to place indicators over the image.
"""

from typing import List

import numpy as np

from .conversion import round_half_up
from .sampling import PixelSample


def default_position(index: int, k: int, width: int, height: int) -> tuple:
    """Evenly spaced fallback along the horizontal midline."""
    return (round_half_up(width / (k + 1) * (index + 1)), round_half_up(height / 2))


def resolve_positions(centroids: np.ndarray, sample: PixelSample,
                      labels: np.ndarray) -> List[tuple]:
    """
    Pick an (x, y) anchor for each centroid.

    Args:
        centroids: Final colors (k, 3), possibly adjusted after clustering
        sample: Pixel sample the clustering ran on
        labels: Cluster index per sampled pixel from the last k-means pass

    Returns:
        List of k (x, y) tuples
    """
    k = len(centroids)
    positions = []

    for idx, centroid in enumerate(centroids):
        members = np.flatnonzero(labels == idx)
        if members.size == 0:
            positions.append(default_position(idx, k, sample.width, sample.height))
            continue

        diff = sample.pixels[members].astype(np.float64) - centroid.astype(np.float64)
        best = members[int(np.argmin(np.sum(diff * diff, axis=1)))]
        x, y = sample.positions[best]
        positions.append((int(x), int(y)))

    return positions

"""
Minimum-separation pass over final k-means centroids.

Guarantees that dominant colors are visually distinguishable even when one
hue dominates the image: near-duplicates are replaced by a frequent sampled
color that is far enough from everything accepted so far, or nudged lighter.
"""

from collections import Counter
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from paleta.config import config
from .conversion import color_distance

RGB = Tuple[int, int, int]


def is_distinct(candidate: Sequence[int], accepted: Sequence[Sequence[int]],
                min_distance: float) -> bool:
    """True if candidate is at least min_distance from every accepted color."""
    return all(color_distance(candidate, existing) >= min_distance for existing in accepted)


def frequent_colors(pixels: np.ndarray,
                    scan_limit: Optional[int] = None,
                    scan_step: Optional[int] = None,
                    top_n: Optional[int] = None) -> List[RGB]:
    """
    Most frequent colors among a strided prefix of the sample.

    Looks at every `scan_step`-th pixel among the first `scan_limit` and
    returns up to `top_n` colors ordered by count, first-seen first on ties.
    """
    scan_limit = config.REPLACEMENT_SCAN_LIMIT if scan_limit is None else scan_limit
    scan_step = config.REPLACEMENT_SCAN_STEP if scan_step is None else scan_step
    top_n = config.REPLACEMENT_TOP_N if top_n is None else top_n

    counts = Counter(
        (int(p[0]), int(p[1]), int(p[2]))
        for p in pixels[:min(len(pixels), scan_limit):scan_step]
    )
    return [color for color, _ in counts.most_common(top_n)]


def find_distinct_replacement(accepted: Sequence[Sequence[int]], pixels: np.ndarray,
                              min_distance: float) -> Optional[RGB]:
    """First frequent sampled color that is distinct from all accepted colors."""
    for candidate in frequent_colors(pixels):
        if is_distinct(candidate, accepted, min_distance):
            return candidate
    return None


def nudge_color(color: Sequence[int], step: Optional[int] = None) -> RGB:
    """Raise every channel by `step`, clamped to 255."""
    step = config.NUDGE_STEP if step is None else step
    return tuple(min(255, int(c) + step) for c in color)


def ensure_distinct_colors(centroids: np.ndarray, pixels: np.ndarray,
                           min_distance: Optional[float] = None) -> np.ndarray:
    """
    Enforce a minimum pairwise RGB distance between centroids, in order.

    Args:
        centroids: Final centroids (k, 3)
        pixels: Sampled RGB pixels used as the replacement pool
        min_distance: Separation threshold, defaults to PALETA_MIN_DISTANCE

    Returns:
        Adjusted centroids (k, 3) int64, same order as the input
    """
    min_distance = config.MIN_DISTANCE if min_distance is None else min_distance
    accepted: List[RGB] = []

    for idx, centroid in enumerate(centroids):
        color = (int(centroid[0]), int(centroid[1]), int(centroid[2]))

        if is_distinct(color, accepted, min_distance):
            accepted.append(color)
            continue

        replacement = find_distinct_replacement(accepted, pixels, min_distance)
        if replacement is not None:
            logger.debug(f"Centroid {idx} {color} replaced by sampled color {replacement}")
            accepted.append(replacement)
        else:
            nudged = nudge_color(color)
            logger.warning(f"No distinct replacement for centroid {idx} {color}; nudged to {nudged}")
            accepted.append(nudged)

    return np.array(accepted, dtype=np.int64).reshape(-1, 3)

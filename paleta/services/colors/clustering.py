"""
K-means clustering of sampled pixels with distinct-centroid seeding.

Seeding is a farthest-point heuristic: after a random first centroid, each
further centroid is the best of a fixed number of random candidates by its
minimum distance to the centroids already chosen. Clustering then runs a fixed
number of Lloyd iterations with no convergence check.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from loguru import logger

from paleta.config import config


@dataclass
class KMeansResult:
    """Final centroids and the pixel-to-cluster mapping of the last pass."""
    centroids: np.ndarray  # (k, 3) int64
    labels: np.ndarray     # (N,) int64
    iterations: int
    reseeded: int


def pairwise_distances(pixels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Euclidean RGB distance from every pixel to every centroid, shape (N, k).

    Expands |p - c|^2 as |p|^2 - 2p.c + |c|^2 so only (N, k) temporaries are
    built. Channels are integral, so the squared terms are exact in float64.
    """
    p = pixels.astype(np.float64)
    c = centroids.astype(np.float64)
    squared = (p * p).sum(axis=1)[:, None] - 2.0 * (p @ c.T) + (c * c).sum(axis=1)[None, :]
    return np.sqrt(np.maximum(squared, 0.0))


def assign_to_nearest(pixels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid per pixel; the lowest index wins ties."""
    return np.argmin(pairwise_distances(pixels, centroids), axis=1)


def seed_distinct_centroids(pixels: np.ndarray, k: int, rng: np.random.Generator,
                            trials: Optional[int] = None) -> np.ndarray:
    """
    Pick k well-separated initial centroids from the sample.

    Args:
        pixels: Sampled RGB pixels (N, 3)
        k: Number of centroids
        rng: Random generator driving candidate draws
        trials: Candidates drawn per centroid, defaults to PALETA_SEED_TRIALS

    Returns:
        Initial centroids (k, 3) int64
    """
    trials = config.SEED_TRIALS if trials is None else trials
    n = pixels.shape[0]

    centroids = [pixels[rng.integers(n)].copy()]

    while len(centroids) < k:
        candidates = pixels[rng.integers(n, size=trials)]
        min_dists = pairwise_distances(candidates, np.array(centroids)).min(axis=1)
        best = int(np.argmax(min_dists))

        if min_dists[best] > 0:
            centroids.append(candidates[best].copy())
        else:
            # Every candidate coincides with an existing centroid
            centroids.append(pixels[rng.integers(n)].copy())

    return np.array(centroids, dtype=np.int64)


def update_centroids(pixels: np.ndarray, labels: np.ndarray, k: int,
                     rng: np.random.Generator) -> tuple:
    """
    Move each centroid to the rounded mean of its members.

    Empty clusters are reseeded to a random sampled pixel.

    Returns:
        Tuple of (new centroids (k, 3), number of reseeded clusters)
    """
    counts = np.bincount(labels, minlength=k)
    centroids = np.empty((k, 3), dtype=np.int64)
    reseeded = 0

    for idx in range(k):
        if counts[idx] == 0:
            centroids[idx] = pixels[rng.integers(pixels.shape[0])]
            reseeded += 1
            continue
        mean = pixels[labels == idx].sum(axis=0) / counts[idx]
        centroids[idx] = np.floor(mean + 0.5).astype(np.int64)

    return centroids, reseeded


def run_kmeans(pixels: np.ndarray, k: int, rng: np.random.Generator,
               iterations: Optional[int] = None,
               initial_centroids: Optional[np.ndarray] = None) -> KMeansResult:
    """
    Run fixed-length k-means over sampled pixels.

    Args:
        pixels: Sampled RGB pixels (N, 3), N > 0
        k: Number of clusters
        rng: Random generator for seeding and empty-cluster recovery
        iterations: Pass count, defaults to PALETA_KMEANS_ITERATIONS
        initial_centroids: Skip seeding and start from these centroids

    Returns:
        KMeansResult with k centroids and the last assignment pass
    """
    iterations = config.KMEANS_ITERATIONS if iterations is None else iterations

    if initial_centroids is None:
        centroids = seed_distinct_centroids(pixels, k, rng)
    else:
        centroids = np.asarray(initial_centroids, dtype=np.int64).copy()

    labels = np.zeros(pixels.shape[0], dtype=np.int64)
    total_reseeded = 0

    for iteration in range(iterations):
        labels = assign_to_nearest(pixels, centroids)
        centroids, reseeded = update_centroids(pixels, labels, k, rng)
        total_reseeded += reseeded
        if reseeded:
            logger.debug(f"Iteration {iteration}: reseeded {reseeded} empty cluster(s)")

    if total_reseeded:
        logger.warning(f"K-means reseeded {total_reseeded} empty cluster(s) over {iterations} iterations")

    logger.info(f"K-means finished: k={k}, pixels={pixels.shape[0]}, iterations={iterations}")

    return KMeansResult(
        centroids=centroids,
        labels=labels.astype(np.int64),
        iterations=iterations,
        reseeded=total_reseeded
    )

#!/usr/bin/env python3
"""
Cluster weighted RGB samples into representative colors.

k-means++ seeding followed by Lloyd iterations in RGB space. Centroids are
integer RGB triples; output is ordered by cluster size, largest first.
"""

from typing import Optional, Union

import numpy as np
from scipy.spatial.distance import cdist


MAX_ITERATIONS = 15

RandomState = Optional[Union[int, np.random.Generator]]


def make_rng(random_state: RandomState = None) -> np.random.Generator:
    """Return a Generator for a seed, an existing Generator, or None (unseeded)."""
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def assign(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid for each sample. Ties go to the lower index."""
    distances = cdist(samples, centroids, metric='euclidean')
    return np.argmin(distances, axis=1)


def seed_centroids(samples: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """
    Choose k initial centroids with k-means++.

    The first centroid is uniform over samples. Each further centroid is picked
    by roulette over squared distance to the nearest centroid chosen so far.
    """
    n = len(samples)
    first = int(rng.integers(n))
    centroids = [samples[first]]

    # Squared distance from each sample to its nearest chosen centroid
    nearest_sq = cdist(samples, samples[first:first + 1], metric='sqeuclidean')[:, 0]

    for _ in range(1, k):
        cumulative = np.cumsum(nearest_sq)
        target = rng.random() * cumulative[-1]
        index = int(np.searchsorted(cumulative, target, side='left'))
        index = min(index, n - 1)

        centroids.append(samples[index])
        new_sq = cdist(samples, samples[index:index + 1], metric='sqeuclidean')[:, 0]
        nearest_sq = np.minimum(nearest_sq, new_sq)

    return np.array(centroids, dtype=np.int64)


def update_centroids(samples: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Move each centroid to the rounded mean of its samples. Empty clusters stay put."""
    new_centroids = centroids.copy()
    for i in range(len(centroids)):
        members = samples[labels == i]
        if len(members) == 0:
            continue
        # Round half up
        new_centroids[i] = np.floor(members.mean(axis=0) + 0.5).astype(np.int64)
    return new_centroids


def cluster_with_sizes(samples, k: int, max_iterations: int = MAX_ITERATIONS,
                       random_state: RandomState = None) -> tuple[np.ndarray, np.ndarray]:
    """
    Cluster samples and report how many samples each centroid holds.

    Returns:
        Tuple of (centroids, sizes), both sorted by size descending.
        When there are no more samples than k, samples are returned as-is
        with a size of 1 each.

    Raises:
        ValueError: If k < 1
    """
    if k < 1:
        raise ValueError(f"Cluster count must be at least 1, got {k}")

    samples = np.asarray(samples, dtype=np.int64).reshape(-1, 3)

    # Fewer samples than requested: nothing to cluster
    if len(samples) <= k:
        return samples, np.ones(len(samples), dtype=np.int64)

    rng = make_rng(random_state)
    centroids = seed_centroids(samples, k, rng)

    for _ in range(max_iterations):
        labels = assign(samples, centroids)
        new_centroids = update_centroids(samples, labels, centroids)
        converged = np.array_equal(new_centroids, centroids)
        centroids = new_centroids
        if converged:
            break

    # Final centroids are fixed, so one assignment pass gives every size
    sizes = np.bincount(assign(samples, centroids), minlength=k)
    order = np.argsort(-sizes, kind='stable')

    return centroids[order], sizes[order]


def cluster(samples, k: int, max_iterations: int = MAX_ITERATIONS,
            random_state: RandomState = None) -> np.ndarray:
    """
    Group samples into at most k representative colors.

    Args:
        samples: (n, 3) RGB samples, repeated rows act as weights
        k: Number of clusters requested
        max_iterations: Iteration cap if centroids never settle
        random_state: Seed or Generator for k-means++ seeding

    Returns:
        int array of shape (m, 3), m <= k, largest cluster first
    """
    centroids, _ = cluster_with_sizes(samples, k, max_iterations, random_state)
    return centroids

"""
Weighted k-means refinement in CIE L*a*b*.

Starting from Wu centroids, each distinct color is reassigned to its nearest
cluster and the clusters are moved to the population-weighted mean of their
members. Starting clusters make the result deterministic, no random seeding.
"""

from typing import List, Sequence, Tuple

import numpy as np
from loguru import logger

from ..color_utils import RGBColor, SRGB_TO_XYZ, WHITE_POINT_D65, lab_from_rgb, rgb_from_lab


MAX_ITERATIONS = 10


def lab_from_rgb_array(colors: np.ndarray) -> np.ndarray:
    """Vectorized sRGB (M, 3) uint8 -> L*a*b* (M, 3) float64."""
    normalized = colors.astype(np.float64) / 255.0
    linear = np.where(
        normalized <= 0.040449936,
        normalized / 12.92,
        ((normalized + 0.055) / 1.055) ** 2.4,
    ) * 100.0
    xyz = linear @ np.asarray(SRGB_TO_XYZ).T
    scaled = xyz / np.asarray(WHITE_POINT_D65)

    e = 216.0 / 24389.0
    kappa = 24389.0 / 27.0
    f = np.where(scaled > e, np.cbrt(scaled), (kappa * scaled + 16.0) / 116.0)
    l = 116.0 * f[:, 1] - 16.0
    a = 500.0 * (f[:, 0] - f[:, 1])
    b = 200.0 * (f[:, 1] - f[:, 2])
    return np.stack([l, a, b], axis=1)


def refine(colors: np.ndarray,
           counts: np.ndarray,
           starting_clusters: Sequence[RGBColor],
           max_iterations: int = MAX_ITERATIONS) -> List[Tuple[RGBColor, int]]:
    """
    Refine starting clusters over weighted distinct colors.

    Args:
        colors: Distinct RGB colors (M, 3) uint8
        counts: Population of each color (M,)
        starting_clusters: Initial cluster colors, usually Wu centroids
        max_iterations: Upper bound on reassignment rounds

    Returns:
        List of (cluster color, population); clusters that round to the same
        8-bit color are merged and empty clusters are dropped
    """
    points = lab_from_rgb_array(colors)
    weights = counts.astype(np.float64)
    clusters = np.array([lab_from_rgb(c) for c in starting_clusters], dtype=np.float64)
    cluster_count = len(clusters)

    point_norms = (points ** 2).sum(axis=1)[:, None]
    assignments = None
    iterations = 0
    for iteration in range(max_iterations):
        iterations = iteration + 1
        distances = point_norms - 2.0 * points @ clusters.T + (clusters ** 2).sum(axis=1)[None, :]
        new_assignments = distances.argmin(axis=1)
        if assignments is not None and np.array_equal(new_assignments, assignments):
            break
        assignments = new_assignments

        totals = np.bincount(assignments, weights=weights, minlength=cluster_count)
        sums = np.zeros((cluster_count, 3), dtype=np.float64)
        np.add.at(sums, assignments, points * weights[:, None])
        occupied = totals > 0
        clusters[occupied] = sums[occupied] / totals[occupied, None]

    populations = np.zeros(cluster_count, dtype=np.int64)
    np.add.at(populations, assignments, counts.astype(np.int64))

    merged = {}
    for index in range(cluster_count):
        population = int(populations[index])
        if population == 0:
            continue
        color = rgb_from_lab(*clusters[index])
        merged[color] = merged.get(color, 0) + population

    logger.debug(f"Refined {cluster_count} clusters in {iterations} iterations -> {len(merged)} colors")
    return list(merged.items())

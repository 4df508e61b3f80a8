"""
Synthetic point sets for demos and tests.
"""

from __future__ import annotations

from typing import List

import numpy as np

from ..algorithms.kmeans import RandomState, as_generator
from ..algorithms.models import Point

CENTER_RANGE = 100.0
SPREAD = 10.0


def generate_clustered_data(
    clusters_count: int,
    points_per_cluster: int,
    dimensions: int,
    random_state: RandomState = None,
) -> List[Point]:
    """
    Points scattered uniformly within +/-10 of random centres in [0, 100).

    Points are ordered by cluster: the first points_per_cluster belong to the
    first centre, and so on.
    """
    if clusters_count < 1 or points_per_cluster < 1 or dimensions < 1:
        raise ValueError("clusters_count, points_per_cluster and dimensions must be >= 1")
    rng = as_generator(random_state)
    centers = rng.random((clusters_count, dimensions)) * CENTER_RANGE
    points = []
    for center in centers:
        offsets = (rng.random((points_per_cluster, dimensions)) - 0.5) * 2 * SPREAD
        points.extend(Point(row) for row in center + offsets)
    return points


def generate_random_data(
    points_count: int, dimensions: int, random_state: RandomState = None
) -> List[Point]:
    """Points uniform in [0, 100) with no cluster structure."""
    if points_count < 1 or dimensions < 1:
        raise ValueError("points_count and dimensions must be >= 1")
    rng = as_generator(random_state)
    return [Point(row) for row in rng.random((points_count, dimensions)) * CENTER_RANGE]

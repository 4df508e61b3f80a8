"""
Point and Cluster, the data types the k-means engine works on.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

import numpy as np

from ..exceptions import DimensionMismatch, EmptyInput, NullArgument

UNASSIGNED = -1


def _as_vector(values: Sequence[float]) -> np.ndarray:
    """Copy *values* into a 1-D float64 array."""
    if values is None:
        raise NullArgument("features must not be None")
    arr = np.array(values, dtype=np.float64)
    if arr.ndim != 1:
        raise DimensionMismatch(
            f"features must be one-dimensional, got shape {arr.shape}"
        )
    return arr


@dataclass(eq=False)
class Point:
    """
    One observation in feature space.

    ``features`` keeps its dimensionality for the lifetime of the point;
    ``replace_features`` refuses vectors of a different length. Equality is
    identity, so a point is only ever "the same" as itself.
    """

    features: np.ndarray
    cluster_id: int = UNASSIGNED

    def __post_init__(self):
        """Coerce features to a private float64 vector."""
        self.features = _as_vector(self.features)

    @property
    def dimensions(self) -> int:
        return int(self.features.shape[0])

    def distance_to(self, other: "Point") -> float:
        """
        Euclidean distance to *other*.

        Raises:
            NullArgument: If other is None
            DimensionMismatch: If the feature vectors differ in length
        """
        if other is None:
            raise NullArgument("Cannot compute distance to None")
        if self.features.shape[0] != other.features.shape[0]:
            raise DimensionMismatch(
                "Feature dimensions do not match",
                details={"left": self.features.shape[0], "right": other.features.shape[0]},
            )
        diff = self.features - other.features
        return float(np.sqrt(np.dot(diff, diff)))

    def replace_features(self, values: Sequence[float]) -> None:
        """Swap in a new feature vector of the same dimensionality."""
        new = _as_vector(values)
        if new.shape[0] != self.features.shape[0]:
            raise DimensionMismatch(
                "Replacement features change dimensionality",
                details={"expected": self.features.shape[0], "actual": new.shape[0]},
            )
        self.features = new

    def copy(self) -> "Point":
        """Independent copy of the feature vector, unassigned."""
        return Point(self.features.copy())


def stack_features(points: Sequence[Point]) -> np.ndarray:
    """
    Stack point features into an (n, d) matrix.

    Raises:
        NullArgument: If points (or any element) is None
        EmptyInput: If points is empty
        DimensionMismatch: If the points differ in dimensionality
    """
    if points is None:
        raise NullArgument("points must not be None")
    if len(points) == 0:
        raise EmptyInput("No points to cluster")
    d = None
    for i, p in enumerate(points):
        if p is None:
            raise NullArgument(f"Point at index {i} is None")
        if d is None:
            d = p.features.shape[0]
        elif p.features.shape[0] != d:
            raise DimensionMismatch(
                "All points must share one dimensionality",
                details={"index": i, "expected": d, "actual": p.features.shape[0]},
            )
    return np.vstack([p.features for p in points])


@dataclass(eq=False)
class Cluster:
    """
    A cluster: a stable id, a centroid and the members of the current pass.

    Members are rebuilt every iteration. ``add_members`` is guarded by a
    per-cluster lock so concurrent writers never drop points.
    """

    id: int
    centroid: Point
    members: List[Point] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self):
        if self.centroid is None:
            raise NullArgument(f"Cluster {self.id} needs a centroid")

    def __len__(self) -> int:
        return len(self.members)

    def clear_members(self) -> None:
        with self._lock:
            self.members = []

    def add_members(self, points: Iterable[Point]) -> None:
        """Append points to this cluster's member list."""
        with self._lock:
            self.members.extend(points)

    def update_centroid(self) -> None:
        """
        Move the centroid to the per-dimension mean of the members.

        An empty cluster keeps its previous centroid.
        """
        if not self.members:
            return
        d = self.centroid.dimensions
        for p in self.members:
            if p.features.shape[0] != d:
                raise DimensionMismatch(
                    f"Member of cluster {self.id} does not match centroid dimensionality",
                    details={"expected": d, "actual": p.features.shape[0]},
                )
        X = np.vstack([p.features for p in self.members])
        self.centroid.replace_features(X.mean(axis=0))

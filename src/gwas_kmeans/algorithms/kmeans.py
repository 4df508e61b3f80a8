"""
K-means clustering engine.

k-means++ seeding followed by Lloyd iterations. The assignment step fans out
over contiguous chunks of points on a thread pool; each worker reports how
many of its points changed cluster plus per-cluster buckets. The counts are
summed and the buckets merged in chunk order once the pool joins, so
membership order does not depend on scheduling.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..exceptions import InvalidK
from ..utils.logging_config import get_logger
from .models import UNASSIGNED, Cluster, Point, stack_features

logger = get_logger(__name__)

RandomState = Union[int, np.random.Generator, None]

DEFAULT_MAX_ITERATIONS = 100
# Below this many points per worker the pool costs more than it saves.
MIN_CHUNK_SIZE = 2048
# Cap on the (rows, K, d) difference tensor built per block.
_BLOCK_ELEMENTS = 1 << 22


def as_generator(random_state: RandomState) -> np.random.Generator:
    """
    Return a random source for *random_state*.

    None or an int seed gives a fresh Generator. Anything else is used as is,
    so callers may pass a Generator or any object with the same
    ``integers``/``random`` methods.
    """
    if random_state is None or isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    return random_state


def kmeanspp_init(X: np.ndarray, K: int, rng: np.random.Generator) -> List[int]:
    """
    Choose K seed rows of *X* by the k-means++ rule.

    The first index is uniform. Each later index is drawn with probability
    proportional to the squared distance to its nearest chosen seed, by
    scanning the cumulative weights of the not-yet-chosen rows against one
    uniform draw scaled by the total. If rounding keeps the running sum below
    the threshold, the last eligible row is taken.

    Args:
        X: (n, d) data matrix
        K: Number of seeds, 1 <= K <= n
        rng: Random source

    Returns:
        List of K distinct row indices, in selection order
    """
    n = X.shape[0]
    chosen = [int(rng.integers(0, n))]
    eligible = np.ones(n, dtype=bool)
    eligible[chosen[0]] = False

    diff = X - X[chosen[0]]
    min_sq = np.einsum("nd,nd->n", diff, diff)

    for _ in range(1, K):
        idx = np.flatnonzero(eligible)
        weights = min_sq[idx]
        cumulative = np.cumsum(weights)
        threshold = rng.random() * cumulative[-1]
        pos = int(np.searchsorted(cumulative, threshold, side="left"))
        if pos >= len(idx):
            pos = len(idx) - 1
        pick = int(idx[pos])

        chosen.append(pick)
        eligible[pick] = False
        diff = X - X[pick]
        np.minimum(min_sq, np.einsum("nd,nd->n", diff, diff), out=min_sq)

    return chosen


def nearest_centroids(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Index of the nearest centroid for every row of *X*.

    Equal distances resolve to the lowest centroid index. Rows are processed
    in blocks so the temporary difference tensor stays bounded.
    """
    n = X.shape[0]
    K, d = centroids.shape
    rows_per_block = max(1, _BLOCK_ELEMENTS // max(1, K * d))
    labels = np.empty(n, dtype=np.int64)
    for start in range(0, n, rows_per_block):
        stop = min(n, start + rows_per_block)
        diff = X[start:stop, None, :] - centroids[None, :, :]  # (b, K, d)
        dists = np.sqrt(np.einsum("bkd,bkd->bk", diff, diff))
        labels[start:stop] = np.argmin(dists, axis=1)
    return labels


class KMeansEngine:
    """
    Runs k-means for a fixed K.

    Usage:
        engine = KMeansEngine(3, max_iterations=200, random_state=42)
        clusters = engine.cluster(points)
        engine.n_iter, engine.converged
    """

    def __init__(
        self,
        k: int,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        *,
        random_state: RandomState = None,
        n_workers: Optional[int] = None,
        min_chunk_size: int = MIN_CHUNK_SIZE,
    ):
        """
        Args:
            k: Target number of clusters (>= 1, <= number of points)
            max_iterations: Upper bound on assignment/update passes
            random_state: Seed or Generator for k-means++ seeding
            n_workers: Threads for the assignment step (default: CPU count)
            min_chunk_size: Smallest slice of points handed to one worker

        Raises:
            InvalidK: If k < 1
            ValueError: If max_iterations or n_workers is not positive
        """
        if k < 1:
            raise InvalidK(f"K must be >= 1, got {k}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        if n_workers is None:
            n_workers = os.cpu_count() or 1
        if n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {n_workers}")

        self.k = k
        self.max_iterations = max_iterations
        self.n_workers = n_workers
        self.min_chunk_size = max(1, min_chunk_size)
        self.rng = as_generator(random_state)

        self.n_iter = 0
        self.converged = False
        self.seed_indices: List[int] = []

    def cluster(self, points: Sequence[Point]) -> List[Cluster]:
        """
        Cluster *points* into K groups.

        Each point's ``cluster_id`` is updated in place. The run stops after
        a pass in which no point changed cluster, or after max_iterations.

        Returns:
            K clusters (ids 0..K-1) holding their final members and centroids

        Raises:
            NullArgument: If points or one of its elements is None
            EmptyInput: If points is empty
            InvalidK: If K exceeds the number of points
            DimensionMismatch: If points differ in dimensionality
        """
        X = stack_features(points)
        n = X.shape[0]
        if self.k > n:
            raise InvalidK(
                f"K ({self.k}) cannot exceed number of points ({n})",
                details={"k": self.k, "n_points": n},
            )

        self.seed_indices = kmeanspp_init(X, self.k, self.rng)
        clusters = [
            Cluster(i, Point(X[idx].copy())) for i, idx in enumerate(self.seed_indices)
        ]

        for p in points:
            p.cluster_id = UNASSIGNED

        chunks = self._chunks(n)
        self.n_iter = 0
        self.converged = False

        executor = ThreadPoolExecutor(max_workers=self.n_workers) if len(chunks) > 1 else None
        try:
            while True:
                for c in clusters:
                    c.clear_members()

                changed = self._assign(points, X, clusters, chunks, executor)

                if executor is not None:
                    list(executor.map(Cluster.update_centroid, clusters))
                else:
                    for c in clusters:
                        c.update_centroid()

                self.n_iter += 1
                if not changed:
                    self.converged = True
                    break
                if self.n_iter >= self.max_iterations:
                    break
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        if self.converged:
            logger.info(f"K={self.k}: converged after {self.n_iter} iterations")
        else:
            logger.info(
                f"K={self.k}: stopped at max_iterations={self.max_iterations} without converging"
            )
        return clusters

    def _chunks(self, n: int) -> List[Tuple[int, int]]:
        """Split range(n) into contiguous (start, stop) slices, one per worker."""
        n_chunks = max(1, min(self.n_workers, n // self.min_chunk_size))
        bounds = np.linspace(0, n, n_chunks + 1).astype(int)
        return [(int(bounds[i]), int(bounds[i + 1])) for i in range(n_chunks)]

    def _assign(self, points, X, clusters, chunks, executor) -> bool:
        """One assignment pass. Returns True if any point changed cluster."""
        centroids = np.vstack([c.centroid.features for c in clusters])

        def work(bounds: Tuple[int, int]) -> Tuple[int, List[List[Point]]]:
            start, stop = bounds
            nearest = nearest_centroids(X[start:stop], centroids)
            buckets: List[List[Point]] = [[] for _ in clusters]
            moved = 0
            for offset, label in enumerate(nearest):
                label = int(label)
                point = points[start + offset]
                if point.cluster_id != label:
                    point.cluster_id = label
                    moved += 1
                buckets[label].append(point)
            return moved, buckets

        if executor is None:
            results = [work(b) for b in chunks]
        else:
            results = list(executor.map(work, chunks))

        reassigned = 0
        for moved, buckets in results:
            reassigned += moved
            for cluster, bucket in zip(clusters, buckets):
                if bucket:
                    cluster.add_members(bucket)

        logger.debug(
            f"K={self.k} iteration {self.n_iter + 1}: "
            f"reassigned={reassigned} sizes={[len(c) for c in clusters]}"
        )
        return reassigned > 0

"""
Cluster quality metrics: inertia and silhouette score.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..exceptions import DimensionMismatch, NullArgument
from .models import Cluster

# Upper bound on the (rows, n, d) difference tensor built per silhouette block.
_BLOCK_ELEMENTS = 1 << 22


def _check_clusters(clusters: Sequence[Cluster]) -> None:
    if clusters is None:
        raise NullArgument("clusters must not be None")
    for c in clusters:
        if c is None:
            raise NullArgument("clusters must not contain None")


def inertia(clusters: Sequence[Cluster]) -> float:
    """
    Sum of squared distances from each member to its cluster's centroid.

    Args:
        clusters: Clusters with members and centroids

    Returns:
        Non-negative inertia (0.0 for no members)
    """
    _check_clusters(clusters)
    total = 0.0
    for c in clusters:
        if not c.members:
            continue
        X = np.vstack([p.features for p in c.members])
        if X.shape[1] != c.centroid.dimensions:
            raise DimensionMismatch(
                f"Members of cluster {c.id} do not match centroid dimensionality"
            )
        diff = X - c.centroid.features
        total += float(np.einsum("nd,nd->", diff, diff))
    return total


def silhouette_score(clusters: Sequence[Cluster]) -> float:
    """
    Mean silhouette over all clustered points.

    For point i, a(i) is the mean distance to the other members of its own
    cluster and b(i) the smallest mean distance to the members of any other
    non-empty cluster. The point scores (b - a) / max(a, b), or 0 when that
    maximum is 0. A point alone in its cluster, or with no other non-empty
    cluster to compare against, scores 0.

    Every pairwise distance is evaluated, blockwise to bound memory.

    Args:
        clusters: Clusters with members

    Returns:
        Mean silhouette in [-1, 1]; 0.0 for fewer than two clusters or no points
    """
    _check_clusters(clusters)
    if len(clusters) <= 1:
        return 0.0

    members = [p for c in clusters for p in c.members]
    n = len(members)
    if n == 0:
        return 0.0

    X = np.vstack([p.features for p in members])
    labels = np.concatenate(
        [np.full(len(c.members), j, dtype=np.int64) for j, c in enumerate(clusters)]
    )
    K = len(clusters)
    sizes = np.bincount(labels, minlength=K).astype(np.float64)
    onehot = np.zeros((n, K), dtype=np.float64)
    onehot[np.arange(n), labels] = 1.0

    d = X.shape[1]
    rows_per_block = max(1, _BLOCK_ELEMENTS // max(1, n * d))

    sil = np.zeros(n, dtype=np.float64)
    for start in range(0, n, rows_per_block):
        stop = min(n, start + rows_per_block)
        diff = X[start:stop, None, :] - X[None, :, :]
        dist = np.sqrt(np.einsum("bnd,bnd->bn", diff, diff))
        sums = dist @ onehot  # (block, K) distance sums per cluster

        own = labels[start:stop]
        rows = np.arange(stop - start)
        own_size = sizes[own]

        with np.errstate(divide="ignore", invalid="ignore"):
            means = sums / sizes[None, :]
        means[:, sizes == 0] = np.inf
        means[rows, own] = np.inf
        b = means.min(axis=1)

        a = np.zeros(stop - start, dtype=np.float64)
        has_peers = own_size > 1
        a[has_peers] = sums[rows, own][has_peers] / (own_size[has_peers] - 1)

        defined = has_peers & np.isfinite(b)
        denom = np.maximum(a, b)
        scores = np.zeros(stop - start, dtype=np.float64)
        ok = defined & (denom > 0)
        scores[ok] = (b[ok] - a[ok]) / denom[ok]
        sil[start:stop] = scores

    return float(np.mean(sil))

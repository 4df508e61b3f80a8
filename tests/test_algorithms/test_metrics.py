"""
Tests for inertia and silhouette score.
"""

import math

import numpy as np
import pytest

from gwas_kmeans.algorithms.kmeans import KMeansEngine
from gwas_kmeans.algorithms.metrics import inertia, silhouette_score
from gwas_kmeans.algorithms.models import Cluster, Point
from gwas_kmeans.exceptions import NullArgument


def _make_cluster(cid, rows):
    cluster = Cluster(cid, Point(np.zeros(len(rows[0]))))
    cluster.add_members(Point(r) for r in rows)
    cluster.update_centroid()
    return cluster


def _naive_silhouette(clusters):
    """Straightforward per-point silhouette, for cross-checking."""
    if len(clusters) <= 1:
        return 0.0
    total, count = 0.0, 0
    for c in clusters:
        for p in c.members:
            count += 1
            others = [q for q in c.members if q is not p]
            if not others:
                continue
            a = sum(p.distance_to(q) for q in others) / len(others)
            b = math.inf
            for o in clusters:
                if o is c or not o.members:
                    continue
                b = min(b, sum(p.distance_to(q) for q in o.members) / len(o.members))
            if math.isinf(b):
                continue
            denom = max(a, b)
            if denom > 0:
                total += (b - a) / denom
    return total / count if count else 0.0


# ------------------------------------------------------------------
# inertia
# ------------------------------------------------------------------


def test_inertia_four_points():
    """Test inertia on the four-point scenario."""
    clusters = [
        _make_cluster(0, [[0.0, 0.0], [0.0, 1.0]]),
        _make_cluster(1, [[10.0, 0.0], [10.0, 1.0]]),
    ]
    assert inertia(clusters) == pytest.approx(4 * 0.5 ** 2)


def test_inertia_non_negative_and_empty_clusters():
    """Test inertia is non-negative and ignores empty clusters."""
    clusters = [
        _make_cluster(0, [[1.0, 2.0], [3.0, 5.0], [-1.0, 0.5]]),
        Cluster(1, Point([100.0, 100.0])),
    ]
    assert inertia(clusters) >= 0.0
    assert inertia([Cluster(0, Point([0.0]))]) == 0.0
    assert inertia([]) == 0.0


def test_inertia_non_increasing_in_k():
    """Three pairs of points far apart, swept K=1..N."""
    rows = [[0.0, 0.0], [0.0, 1.0], [100.0, 0.0], [100.0, 2.0], [0.0, 100.0], [3.0, 100.0]]
    points = [Point(r) for r in rows]
    values = []
    for k in range(1, len(points) + 1):
        clusters = KMeansEngine(k, random_state=0, n_workers=1).cluster(points)
        values.append(inertia(clusters))
    assert all(v >= 0 for v in values)
    for prev, nxt in zip(values, values[1:]):
        assert nxt <= prev + 1e-9
    assert values[-1] == 0.0


def test_inertia_none():
    """Test inertia rejects None."""
    with pytest.raises(NullArgument):
        inertia(None)


# ------------------------------------------------------------------
# silhouette_score
# ------------------------------------------------------------------


def test_silhouette_single_cluster_is_zero():
    """Test silhouette is 0 for a single cluster."""
    cluster = _make_cluster(0, [[0.0], [1.0], [5.0]])
    assert silhouette_score([cluster]) == 0.0


def test_silhouette_k1_from_engine_is_zero(three_blob_points):
    """Test silhouette is 0 for a K=1 engine run."""
    clusters = KMeansEngine(1, random_state=0, n_workers=1).cluster(three_blob_points)
    assert silhouette_score(clusters) == 0.0


def test_silhouette_four_points_exact():
    """Test silhouette against a hand-computed value."""
    clusters = [
        _make_cluster(0, [[0.0, 0.0], [0.0, 1.0]]),
        _make_cluster(1, [[10.0, 0.0], [10.0, 1.0]]),
    ]
    a = 1.0
    b = (10.0 + math.sqrt(101.0)) / 2
    expected = (b - a) / b
    assert silhouette_score(clusters) == pytest.approx(expected)


def test_silhouette_singleton_contributes_zero():
    """A singleton cluster's point contributes 0."""
    clusters = [
        _make_cluster(0, [[0.0]]),
        _make_cluster(1, [[10.0], [11.0]]),
    ]
    # singleton scores 0; the pair members: a=1, b=10 and 11
    s10 = (10.0 - 1.0) / 10.0
    s11 = (11.0 - 1.0) / 11.0
    assert silhouette_score(clusters) == pytest.approx((0.0 + s10 + s11) / 3)


def test_silhouette_ignores_empty_clusters():
    """Test empty clusters do not affect the score."""
    clusters = [
        _make_cluster(0, [[0.0], [1.0]]),
        Cluster(1, Point([50.0])),
        _make_cluster(2, [[10.0], [12.0]]),
    ]
    assert silhouette_score(clusters) == pytest.approx(_naive_silhouette(clusters))


def test_silhouette_only_one_populated_cluster_is_zero():
    """Test one populated cluster among empties scores 0."""
    clusters = [_make_cluster(0, [[0.0], [1.0], [2.0]]), Cluster(1, Point([9.0]))]
    assert silhouette_score(clusters) == 0.0


def test_silhouette_all_identical_points_is_zero():
    """Identical points give max(a, b) == 0 and score 0."""
    clusters = [_make_cluster(0, [[1.0], [1.0]]), _make_cluster(1, [[1.0], [1.0]])]
    assert silhouette_score(clusters) == 0.0


def test_silhouette_matches_naive_reference():
    """Test blockwise silhouette against a pairwise loop."""
    rng = np.random.default_rng(21)
    points = [Point(row) for row in rng.normal(size=(90, 4))]
    clusters = KMeansEngine(4, random_state=3, n_workers=1).cluster(points)
    assert silhouette_score(clusters) == pytest.approx(_naive_silhouette(clusters), rel=1e-9)


def test_silhouette_well_separated_near_one(three_blob_points):
    """Test well-separated blobs score close to 1."""
    clusters = KMeansEngine(3, random_state=0, n_workers=1).cluster(three_blob_points)
    score = silhouette_score(clusters)
    assert 0.9 < score <= 1.0


def test_silhouette_none():
    """Test silhouette rejects None."""
    with pytest.raises(NullArgument):
        silhouette_score(None)

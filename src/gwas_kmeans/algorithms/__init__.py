"""
Clustering core - k-means engine, quality metrics and optimal-K search.

Designed for reuse and testing independently of file loading and services.
"""

from .models import UNASSIGNED, Cluster, Point, stack_features
from .kmeans import KMeansEngine, kmeanspp_init, nearest_centroids
from .metrics import inertia, silhouette_score
from .selection import (
    KSearchResult,
    OptimalKSelector,
    best_silhouette_k,
    detect_elbow,
    select_optimal_k,
)

__all__ = [
    # Data types
    "UNASSIGNED",
    "Point",
    "Cluster",
    "stack_features",
    # Engine
    "KMeansEngine",
    "kmeanspp_init",
    "nearest_centroids",
    # Metrics
    "inertia",
    "silhouette_score",
    # K search
    "KSearchResult",
    "OptimalKSelector",
    "detect_elbow",
    "best_silhouette_k",
    "select_optimal_k",
]

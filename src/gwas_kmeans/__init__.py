"""
GWAS K-Means - Core Package

Clusters GWAS summary statistics with k-means and picks the number of
clusters automatically.

This package provides:
- Clustering core (k-means++, inertia, silhouette, optimal-K search)
- GWAS file loading, filtering and normalisation
- Service layer for end-to-end runs
"""

__version__ = "0.1.0"

from .algorithms import (
    Cluster,
    KMeansEngine,
    KSearchResult,
    OptimalKSelector,
    Point,
    inertia,
    silhouette_score,
)
from .exceptions import (
    ClusteringError,
    DimensionMismatch,
    EmptyInput,
    InvalidK,
    NullArgument,
)

from . import algorithms
from . import data
from . import services
from . import utils

__all__ = [
    "Point",
    "Cluster",
    "KMeansEngine",
    "KSearchResult",
    "OptimalKSelector",
    "inertia",
    "silhouette_score",
    "ClusteringError",
    "DimensionMismatch",
    "EmptyInput",
    "InvalidK",
    "NullArgument",
    "algorithms",
    "data",
    "services",
    "utils",
]

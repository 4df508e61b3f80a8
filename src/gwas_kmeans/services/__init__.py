"""
Business Logic Layer (Services)

Services sit between the clustering core and callers (CLI, notebooks, GUIs):
they load and prepare data, drive the K search and keep the latest results.
"""

from .clustering_service import ClusterSummary, ClusteringService

__all__ = [
    "ClusterSummary",
    "ClusteringService",
]

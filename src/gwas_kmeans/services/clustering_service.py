"""
Clustering Service - orchestration around the clustering core.

Loads and prepares GWAS points, searches for the best K, runs the final
clustering and summarises the resulting clusters. Keeps the latest results
on the instance for callers that display them.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from ..algorithms import KMeansEngine, KSearchResult, OptimalKSelector
from ..algorithms.kmeans import RandomState, as_generator
from ..algorithms.models import Cluster, Point
from ..config import Config, FilterOptions
from ..data.loader import GwasDataLoader
from ..data.normalization import normalize_points, transform_gwas_features
from ..utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ClusterSummary:
    """Descriptive statistics for one cluster."""

    cluster_id: int
    size: int
    centroid: Dict[str, float]
    feature_means: Dict[str, float] = field(default_factory=dict)
    feature_stds: Dict[str, float] = field(default_factory=dict)
    mean_distance_to_centroid: float = 0.0

    def to_dict(self) -> dict:
        return {
            "cluster_id": self.cluster_id,
            "size": self.size,
            "centroid": self.centroid,
            "feature_means": self.feature_means,
            "feature_stds": self.feature_stds,
            "mean_distance_to_centroid": self.mean_distance_to_centroid,
        }


class ClusteringService:
    """
    Service for preparing GWAS data and clustering it.

    Usage:
        service = ClusteringService(random_state=42)
        points = service.load_and_prepare_data("stats.txt", FilterOptions())
        k = service.determine_optimal_k(points, 2, 8)
        clusters = service.perform_clustering(points, k)
        summaries = service.analyze_clusters(feature_names=["LOGP", "ZSCORE", "A1FREQ"])
    """

    def __init__(self, config: Optional[Config] = None, random_state: RandomState = None):
        """
        Initialize the clustering service.

        Args:
            config: Application config (defaults to a fresh Config from the environment)
            random_state: Seed or Generator; defaults to the configured seed
        """
        self.config = config or Config()
        settings = self.config.clustering
        if random_state is None:
            random_state = settings.seed
        self.rng = as_generator(random_state)

        self.clusters: List[Cluster] = []
        self.inertia_values: Dict[int, float] = {}
        self.silhouette_scores: Dict[int, float] = {}
        self.last_search: Optional[KSearchResult] = None

    def load_and_prepare_data(
        self, file_path: Union[str, Path], options: Optional[FilterOptions] = None
    ) -> List[Point]:
        """
        Load, filter, transform and normalise a GWAS file.

        Args:
            file_path: GWAS summary-statistics file
            options: Filters and feature selection (default: config.filter_options)

        Returns:
            Points ready for clustering
        """
        options = options or self.config.filter_options
        loader = GwasDataLoader(file_path, has_header=options.has_header)
        points = loader.load_points(options)
        transform_gwas_features(points, options.selected_features)
        normalize_points(points, options.normalization_method)
        logger.info(
            f"Prepared {len(points)} points with features {list(options.selected_features)} "
            f"({options.normalization_method.value} normalization)"
        )
        return points

    def determine_optimal_k(
        self,
        points: Sequence[Point],
        min_k: Optional[int] = None,
        max_k: Optional[int] = None,
    ) -> int:
        """
        Sweep K and return the selected value.

        The per-K inertia and silhouette tables are kept on the service.
        """
        settings = self.config.clustering
        selector = OptimalKSelector(
            min_k=settings.min_k if min_k is None else min_k,
            max_k=settings.max_k if max_k is None else max_k,
            max_iterations=settings.max_iterations,
            random_state=self.rng,
            n_workers=settings.n_workers,
        )
        result = selector.select(points)
        self.last_search = result
        self.inertia_values = dict(result.inertia_by_k)
        self.silhouette_scores = dict(result.silhouette_by_k)
        return result.optimal_k

    def perform_clustering(
        self, points: Sequence[Point], k: int, max_iterations: Optional[int] = None
    ) -> List[Cluster]:
        """
        Run one clustering with the final K.

        Args:
            points: Prepared points
            k: Number of clusters
            max_iterations: Iteration cap; missing or non-positive values use
                the configured final_max_iterations

        Returns:
            The clusters, also stored on ``self.clusters``
        """
        settings = self.config.clustering
        if max_iterations is None or max_iterations <= 0:
            max_iterations = settings.final_max_iterations
        engine = KMeansEngine(
            k, max_iterations, random_state=self.rng, n_workers=settings.n_workers
        )
        self.clusters = engine.cluster(points)
        return self.clusters

    def analyze_clusters(
        self,
        clusters: Optional[Sequence[Cluster]] = None,
        feature_names: Optional[Sequence[str]] = None,
    ) -> List[ClusterSummary]:
        """
        Summarise clusters feature by feature.

        Args:
            clusters: Clusters to describe (default: the last clustering)
            feature_names: Names for the feature columns (default: f0, f1, ...)

        Returns:
            One ClusterSummary per cluster, in cluster order
        """
        clusters = self.clusters if clusters is None else clusters
        summaries = []
        for c in clusters:
            d = c.centroid.dimensions
            names = list(feature_names) if feature_names else [f"f{i}" for i in range(d)]
            if len(names) != d:
                raise ValueError(
                    f"Expected {d} feature names, got {len(names)}"
                )
            summary = ClusterSummary(
                cluster_id=c.id,
                size=len(c.members),
                centroid=dict(zip(names, c.centroid.features.tolist())),
            )
            if c.members:
                X = np.vstack([p.features for p in c.members])
                summary.feature_means = dict(zip(names, X.mean(axis=0).tolist()))
                summary.feature_stds = dict(zip(names, X.std(axis=0).tolist()))
                summary.mean_distance_to_centroid = float(
                    np.mean([p.distance_to(c.centroid) for p in c.members])
                )
            summaries.append(summary)
        return summaries

    async def load_and_prepare_data_async(
        self, file_path: Union[str, Path], options: Optional[FilterOptions] = None
    ) -> List[Point]:
        """Async wrapper around load_and_prepare_data."""
        return await self._run_in_executor(self.load_and_prepare_data, file_path, options)

    async def determine_optimal_k_async(
        self,
        points: Sequence[Point],
        min_k: Optional[int] = None,
        max_k: Optional[int] = None,
    ) -> int:
        """Async wrapper around determine_optimal_k."""
        return await self._run_in_executor(self.determine_optimal_k, points, min_k, max_k)

    async def perform_clustering_async(
        self, points: Sequence[Point], k: int, max_iterations: Optional[int] = None
    ) -> List[Cluster]:
        """Async wrapper around perform_clustering."""
        return await self._run_in_executor(self.perform_clustering, points, k, max_iterations)

    async def _run_in_executor(self, func, *args):
        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=1) as executor:
            return await loop.run_in_executor(executor, func, *args)

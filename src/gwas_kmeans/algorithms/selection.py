"""
Optimal-K search.

Runs the k-means engine for every K in a range, records inertia and
silhouette per K, and reconciles the inertia elbow with the silhouette
maximum to pick one K.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from ..exceptions import EmptyInput, InvalidK, NullArgument
from ..utils.logging_config import get_logger
from .kmeans import DEFAULT_MAX_ITERATIONS, KMeansEngine, RandomState, as_generator
from .metrics import inertia, silhouette_score
from .models import Point

logger = get_logger(__name__)

DEFAULT_ELBOW_K = 2
# Elbow and silhouette picks this close together count as agreeing.
AGREEMENT_WINDOW = 2


@dataclass
class KSearchResult:
    """Outcome of a K search."""

    optimal_k: int
    elbow_k: int
    silhouette_k: int
    inertia_by_k: Dict[int, float] = field(default_factory=dict)
    silhouette_by_k: Dict[int, float] = field(default_factory=dict)


def detect_elbow(inertia_by_k: Mapping[int, float]) -> int:
    """
    K at the sharpest bend of the inertia curve.

    For each interior K (in ascending order) the ratio of the drop coming in
    to the drop going out is computed; the K with the largest ratio wins.
    Falls back to K=2 when no interior K beats a ratio of 0.
    """
    ks = sorted(inertia_by_k)
    best_ratio = 0.0
    elbow_k = DEFAULT_ELBOW_K
    for i in range(1, len(ks) - 1):
        prev_diff = inertia_by_k[ks[i - 1]] - inertia_by_k[ks[i]]
        next_diff = inertia_by_k[ks[i]] - inertia_by_k[ks[i + 1]]
        if next_diff != 0:
            ratio = prev_diff / next_diff
            if ratio > best_ratio:
                best_ratio = ratio
                elbow_k = ks[i]
    return elbow_k


def best_silhouette_k(silhouette_by_k: Mapping[int, float]) -> int:
    """K with the highest silhouette; the smallest K wins ties."""
    if not silhouette_by_k:
        raise EmptyInput("No silhouette scores to choose from")
    best_k = None
    best_score = None
    for k in sorted(silhouette_by_k):
        score = silhouette_by_k[k]
        if best_score is None or score > best_score:
            best_k, best_score = k, score
    return best_k


def select_optimal_k(
    inertia_by_k: Mapping[int, float], silhouette_by_k: Mapping[int, float]
) -> int:
    """
    Reconcile the elbow and silhouette picks.

    When they are within AGREEMENT_WINDOW of each other the smaller K is
    returned, otherwise the silhouette pick.
    """
    elbow_k = detect_elbow(inertia_by_k)
    sil_k = best_silhouette_k(silhouette_by_k)
    if abs(sil_k - elbow_k) <= AGREEMENT_WINDOW:
        return min(sil_k, elbow_k)
    return sil_k


class OptimalKSelector:
    """
    Sweeps K over [min_k, max_k] and picks the best one.

    Usage:
        selector = OptimalKSelector(min_k=2, max_k=8, random_state=0)
        result = selector.select(points)
        result.optimal_k, result.inertia_by_k, result.silhouette_by_k
    """

    def __init__(
        self,
        min_k: int = 2,
        max_k: int = 10,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        random_state: RandomState = None,
        n_workers: Optional[int] = None,
    ):
        """
        Args:
            min_k: Smallest K to try (>= 1)
            max_k: Largest K to try (>= min_k)
            max_iterations: Iteration cap for every clustering run
            random_state: Seed or Generator shared by the runs, in K order
            n_workers: Threads per clustering run

        Raises:
            InvalidK: If min_k < 1 or max_k < min_k
        """
        if min_k < 1:
            raise InvalidK(f"min_k must be >= 1, got {min_k}")
        if max_k < min_k:
            raise InvalidK(f"max_k ({max_k}) must be >= min_k ({min_k})")
        self.min_k = min_k
        self.max_k = max_k
        self.max_iterations = max_iterations
        self.n_workers = n_workers
        self.rng = as_generator(random_state)

    def select(self, points: Sequence[Point]) -> KSearchResult:
        """
        Cluster *points* for every K in range and choose K.

        A K the data cannot support (K > number of points) aborts the whole
        search with InvalidK.
        """
        if points is None:
            raise NullArgument("points must not be None")
        if len(points) == 0:
            raise EmptyInput("No points to cluster")
        if self.max_k > len(points):
            raise InvalidK(
                f"max_k ({self.max_k}) cannot exceed number of points ({len(points)})",
                details={"max_k": self.max_k, "n_points": len(points)},
            )

        inertia_by_k: Dict[int, float] = {}
        silhouette_by_k: Dict[int, float] = {}

        for k in range(self.min_k, self.max_k + 1):
            engine = KMeansEngine(
                k,
                self.max_iterations,
                random_state=self.rng,
                n_workers=self.n_workers,
            )
            clusters = engine.cluster(points)
            inertia_by_k[k] = inertia(clusters)
            silhouette_by_k[k] = silhouette_score(clusters)
            logger.info(
                f"K={k}: inertia={inertia_by_k[k]:.6g} "
                f"silhouette={silhouette_by_k[k]:.4f} iterations={engine.n_iter}"
            )

        elbow_k = detect_elbow(inertia_by_k)
        sil_k = best_silhouette_k(silhouette_by_k)
        optimal_k = select_optimal_k(inertia_by_k, silhouette_by_k)
        logger.info(
            f"Selected K={optimal_k} (elbow K={elbow_k}, silhouette K={sil_k})"
        )

        return KSearchResult(
            optimal_k=optimal_k,
            elbow_k=elbow_k,
            silhouette_k=sil_k,
            inertia_by_k=inertia_by_k,
            silhouette_by_k=silhouette_by_k,
        )

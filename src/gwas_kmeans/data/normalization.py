"""
Feature normalisation for GWAS points.

Both entry points rewrite the points' feature vectors in place (keeping
their dimensionality) and return the same list for chaining.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence

import numpy as np

from ..algorithms.models import Point, stack_features
from ..exceptions import DimensionMismatch


class NormalizationMethod(Enum):
    """Column-wise scaling applied to every feature."""

    STANDARD = "standard"  # (x - mean) / std
    MIN_MAX = "min_max"  # [0, 1]
    ROBUST = "robust"  # (x - median) / IQR
    LOG_TRANSFORM = "log_transform"  # log(x + eps + 1)
    RANK_BASED = "rank_based"  # average rank scaled to [0, 1]

    @classmethod
    def from_name(cls, name: str) -> "NormalizationMethod":
        """Look up a method by value or member name, case-insensitively."""
        key = name.strip().lower().replace("-", "_")
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise ValueError(
            f"Unknown normalization method '{name}'. "
            f"Choose from: {', '.join(m.value for m in cls)}"
        )


def _standardize(col: np.ndarray) -> np.ndarray:
    std = col.std()
    if std == 0:
        return col
    return (col - col.mean()) / std


def _min_max(col: np.ndarray) -> np.ndarray:
    lo, hi = col.min(), col.max()
    if hi == lo:
        return col
    return (col - lo) / (hi - lo)


def _robust(col: np.ndarray) -> np.ndarray:
    values = np.sort(col)
    n = len(values)
    median = values[n // 2]
    iqr = values[n * 3 // 4] - values[n // 4]
    if iqr == 0:
        return col
    return (col - median) / iqr


def _log_transform(col: np.ndarray) -> np.ndarray:
    lo = col.min()
    eps = abs(lo) + 0.01 if lo <= 0 else 0.0
    return np.log(col + eps + 1.0)


def _rank_based(col: np.ndarray) -> np.ndarray:
    n = len(col)
    if n == 1:
        return np.zeros(1)
    _, inverse, counts = np.unique(col, return_inverse=True, return_counts=True)
    starts = np.cumsum(counts) - counts
    avg_rank = starts + (counts - 1) / 2.0
    return avg_rank[inverse] / (n - 1)


_SCALERS = {
    NormalizationMethod.STANDARD: _standardize,
    NormalizationMethod.MIN_MAX: _min_max,
    NormalizationMethod.ROBUST: _robust,
    NormalizationMethod.LOG_TRANSFORM: _log_transform,
    NormalizationMethod.RANK_BASED: _rank_based,
}


def _write_back(points: Sequence[Point], X: np.ndarray) -> None:
    for p, row in zip(points, X):
        p.replace_features(row)


def normalize_points(points: List[Point], method: NormalizationMethod) -> List[Point]:
    """
    Scale every feature column of *points* with *method*.

    Columns that are constant (zero std, range or IQR) are left as they are.
    """
    if not points:
        return points
    X = stack_features(points)
    scale = _SCALERS[method]
    for j in range(X.shape[1]):
        X[:, j] = scale(X[:, j])
    _write_back(points, X)
    return points


def transform_gwas_features(points: List[Point], feature_names: Sequence[str]) -> List[Point]:
    """
    Apply feature-specific transforms by GWAS column name.

    PVAL becomes -log10(p); BETA and ZSCORE are z-scored; A1FREQ and MAF get
    the arcsine square-root transform. Other features pass through.

    Raises:
        DimensionMismatch: If the names do not match the point dimensionality
    """
    if not points:
        return points
    X = stack_features(points)
    if len(feature_names) != X.shape[1]:
        raise DimensionMismatch(
            "Feature names do not match point dimensionality",
            details={"names": len(feature_names), "dimensions": X.shape[1]},
        )
    for j, name in enumerate(feature_names):
        name = name.upper()
        if name == "PVAL":
            X[:, j] = -np.log10(X[:, j] + 1e-300)
        elif name in ("BETA", "ZSCORE"):
            X[:, j] = _standardize(X[:, j])
        elif name in ("A1FREQ", "MAF"):
            X[:, j] = np.arcsin(np.sqrt(np.clip(X[:, j], 0.001, 0.999)))
    _write_back(points, X)
    return points

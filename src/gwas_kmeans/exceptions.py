"""
Exception hierarchy for gwas_kmeans.

Clustering preconditions raise subclasses of ``ClusteringError``; GWAS input
problems raise ``DataValidationError``; bad settings raise
``ConfigurationError``. All of them are also ``ValueError`` so callers that
only care about "bad input" can catch the builtin.
"""

from typing import Any, Dict, Optional


class GwasKMeansError(Exception):
    """Base exception for all gwas_kmeans errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} (Details: {details_str})"
        return self.message


class ClusteringError(GwasKMeansError, ValueError):
    """Precondition failure inside the clustering core."""


class InvalidK(ClusteringError):
    """K is out of range relative to the input size."""


class EmptyInput(ClusteringError):
    """There are no points to cluster."""


class DimensionMismatch(ClusteringError):
    """Two feature vectors that must agree in length do not."""


class NullArgument(ClusteringError):
    """A required point or collection argument is missing."""


class DataValidationError(GwasKMeansError, ValueError):
    """A GWAS record or feature selection failed validation."""


class UnknownFeatureError(DataValidationError):
    """A requested feature name is not one a GWAS record can provide."""


class ConfigurationError(GwasKMeansError, ValueError):
    """A configuration value is missing or malformed."""

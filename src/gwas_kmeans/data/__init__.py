"""GWAS records, file loading, normalisation and synthetic data."""

from .records import FEATURE_EXTRACTORS, GwasSnp
from .loader import GwasDataLoader
from .normalization import NormalizationMethod, normalize_points, transform_gwas_features
from .generator import generate_clustered_data, generate_random_data

__all__ = [
    "FEATURE_EXTRACTORS",
    "GwasSnp",
    "GwasDataLoader",
    "NormalizationMethod",
    "normalize_points",
    "transform_gwas_features",
    "generate_clustered_data",
    "generate_random_data",
]

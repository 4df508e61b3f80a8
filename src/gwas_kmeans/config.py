"""
Configuration management for gwas_kmeans.

Loads configuration from environment variables (typically from a .env file).
Uses python-dotenv to load .env automatically.

Usage:
    from gwas_kmeans.config import config

    config.clustering.max_k
    config.filter_options.selected_features
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from .data.normalization import NormalizationMethod
from .exceptions import ConfigurationError

# Look for .env in project root (parent of src/)
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


DEFAULT_FEATURES: Tuple[str, ...] = ("LOGP", "ZSCORE", "A1FREQ")


@dataclass
class ClusteringConfig:
    """Parameters for the K search and the final clustering run."""

    max_iterations: int = 100
    final_max_iterations: int = 200
    min_k: int = 2
    max_k: int = 10
    n_workers: int = field(default_factory=lambda: os.cpu_count() or 1)
    seed: Optional[int] = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate ranges."""
        if self.max_iterations < 1:
            raise ConfigurationError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )
        if self.final_max_iterations < 1:
            raise ConfigurationError(
                f"final_max_iterations must be >= 1, got {self.final_max_iterations}"
            )
        if self.min_k < 1:
            raise ConfigurationError(f"min_k must be >= 1, got {self.min_k}")
        if self.max_k < self.min_k:
            raise ConfigurationError(
                f"max_k ({self.max_k}) must be >= min_k ({self.min_k})"
            )
        if self.n_workers < 1:
            raise ConfigurationError(f"n_workers must be >= 1, got {self.n_workers}")


@dataclass
class FilterOptions:
    """Record filters and feature preparation for a GWAS file."""

    min_info_score: float = 0.8
    max_p_value: float = 0.05
    min_maf: float = 0.01
    has_header: bool = True
    selected_features: Tuple[str, ...] = DEFAULT_FEATURES
    normalization_method: NormalizationMethod = NormalizationMethod.STANDARD

    def __post_init__(self):
        """Normalise the feature list and validate the method."""
        self.selected_features = tuple(f.upper() for f in self.selected_features)
        if not self.selected_features:
            raise ConfigurationError("selected_features must not be empty")
        if not isinstance(self.normalization_method, NormalizationMethod):
            try:
                self.normalization_method = NormalizationMethod.from_name(
                    str(self.normalization_method)
                )
            except ValueError as e:
                raise ConfigurationError(str(e)) from e


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    """Read an integer environment variable, keeping *default* when unset."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {name} must be an integer",
            details={"value": raw},
        )


class Config:
    """
    Application configuration loaded from environment variables.

    Environment variables can be set:
    1. In a .env file in the project root
    2. In the system environment
    """

    def __init__(self):
        """Load configuration from environment."""
        defaults = ClusteringConfig()
        self.clustering = ClusteringConfig(
            max_iterations=_env_int("GWAS_KMEANS_MAX_ITERATIONS", defaults.max_iterations),
            final_max_iterations=_env_int(
                "GWAS_KMEANS_FINAL_MAX_ITERATIONS", defaults.final_max_iterations
            ),
            min_k=_env_int("GWAS_KMEANS_MIN_K", defaults.min_k),
            max_k=_env_int("GWAS_KMEANS_MAX_K", defaults.max_k),
            n_workers=_env_int("GWAS_KMEANS_WORKERS", defaults.n_workers),
            seed=_env_int("GWAS_KMEANS_SEED", None),
            log_level=os.getenv("GWAS_KMEANS_LOG_LEVEL", defaults.log_level),
        )
        self.filter_options = FilterOptions()


# Global config instance
config = Config()

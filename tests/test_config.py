"""
Tests for configuration loading and validation.
"""

import pytest

from gwas_kmeans.config import DEFAULT_FEATURES, ClusteringConfig, Config, FilterOptions
from gwas_kmeans.data.normalization import NormalizationMethod
from gwas_kmeans.exceptions import ConfigurationError

ENV_VARS = [
    "GWAS_KMEANS_MAX_ITERATIONS",
    "GWAS_KMEANS_FINAL_MAX_ITERATIONS",
    "GWAS_KMEANS_MIN_K",
    "GWAS_KMEANS_MAX_K",
    "GWAS_KMEANS_WORKERS",
    "GWAS_KMEANS_SEED",
    "GWAS_KMEANS_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every GWAS_KMEANS_* variable for the duration of a test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    """Test configuration defaults with a clean environment."""
    cfg = Config()
    assert cfg.clustering.max_iterations == 100
    assert cfg.clustering.final_max_iterations == 200
    assert cfg.clustering.min_k == 2
    assert cfg.clustering.max_k == 10
    assert cfg.clustering.n_workers >= 1
    assert cfg.clustering.seed is None
    assert cfg.clustering.log_level == "INFO"
    assert cfg.filter_options.selected_features == DEFAULT_FEATURES
    assert cfg.filter_options.normalization_method is NormalizationMethod.STANDARD


def test_environment_overrides(clean_env):
    """Test GWAS_KMEANS_* variables override the defaults."""
    clean_env.setenv("GWAS_KMEANS_MIN_K", "3")
    clean_env.setenv("GWAS_KMEANS_MAX_K", "7")
    clean_env.setenv("GWAS_KMEANS_WORKERS", "2")
    clean_env.setenv("GWAS_KMEANS_SEED", "99")
    clean_env.setenv("GWAS_KMEANS_LOG_LEVEL", "DEBUG")
    cfg = Config()
    assert (cfg.clustering.min_k, cfg.clustering.max_k) == (3, 7)
    assert cfg.clustering.n_workers == 2
    assert cfg.clustering.seed == 99
    assert cfg.clustering.log_level == "DEBUG"


def test_blank_environment_value_keeps_default(clean_env):
    """Test a blank variable keeps the default."""
    clean_env.setenv("GWAS_KMEANS_MAX_K", "  ")
    assert Config().clustering.max_k == 10


def test_malformed_environment_value(clean_env):
    """Test a non-integer variable raises ConfigurationError."""
    clean_env.setenv("GWAS_KMEANS_MAX_ITERATIONS", "lots")
    with pytest.raises(ConfigurationError, match="GWAS_KMEANS_MAX_ITERATIONS"):
        Config()


def test_inconsistent_environment_range(clean_env):
    """Test min_k above max_k from the environment raises."""
    clean_env.setenv("GWAS_KMEANS_MIN_K", "8")
    clean_env.setenv("GWAS_KMEANS_MAX_K", "4")
    with pytest.raises(ConfigurationError, match="max_k"):
        Config()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_iterations": 0},
        {"final_max_iterations": 0},
        {"min_k": 0},
        {"min_k": 5, "max_k": 4},
        {"n_workers": 0},
    ],
)
def test_clustering_config_validation(kwargs):
    """Test ClusteringConfig range validation."""
    with pytest.raises(ConfigurationError):
        ClusteringConfig(**kwargs)


def test_configuration_error_is_value_error():
    """ConfigurationError is also a ValueError."""
    with pytest.raises(ValueError):
        ClusteringConfig(min_k=-1)


def test_filter_options_uppercases_features():
    """Test feature names are upper-cased."""
    options = FilterOptions(selected_features=["logp", "Maf"])
    assert options.selected_features == ("LOGP", "MAF")


def test_filter_options_empty_features():
    """Test an empty feature list is rejected."""
    with pytest.raises(ConfigurationError):
        FilterOptions(selected_features=())


def test_filter_options_method_by_name():
    """Test the normalization method may be given by name."""
    options = FilterOptions(normalization_method="robust")
    assert options.normalization_method is NormalizationMethod.ROBUST


def test_filter_options_unknown_method():
    """Test an unknown normalization name raises."""
    with pytest.raises(ConfigurationError, match="Unknown normalization method"):
        FilterOptions(normalization_method="zscore-ish")

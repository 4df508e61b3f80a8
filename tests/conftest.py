"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test modules.
"""

import numpy as np
import pytest

from gwas_kmeans.algorithms.models import Point


class ScriptedRandom:
    """
    Random source with scripted answers, for pinning k-means++ choices.

    ``integers`` returns the queued indices in order; ``random`` returns the
    queued fractions in order (repeating the last one when exhausted).
    """

    def __init__(self, indices=(0,), fractions=(0.5,)):
        self.indices = list(indices)
        self.fractions = list(fractions)
        self.integer_calls = 0
        self.random_calls = 0

    def integers(self, low, high=None, size=None):
        value = self.indices[min(self.integer_calls, len(self.indices) - 1)]
        self.integer_calls += 1
        return value

    def random(self, size=None):
        value = self.fractions[min(self.random_calls, len(self.fractions) - 1)]
        self.random_calls += 1
        return value


@pytest.fixture
def scripted_random():
    """
    Factory fixture for ScriptedRandom.

    Usage:
        rng = scripted_random(indices=[0], fractions=[0.5])
    """
    return ScriptedRandom


@pytest.fixture
def four_points():
    """Two pairs of adjacent 2-D points, ten units apart."""
    return [Point([0.0, 0.0]), Point([0.0, 1.0]), Point([10.0, 0.0]), Point([10.0, 1.0])]


@pytest.fixture
def three_blob_points():
    """60 points in three tight, far-apart blobs of 20 (in blob order)."""
    rng = np.random.default_rng(7)
    centers = np.array([[0.0, 0.0], [50.0, 0.0], [0.0, 50.0]])
    points = []
    for center in centers:
        for row in center + rng.normal(scale=0.5, size=(20, 2)):
            points.append(Point(row))
    return points


@pytest.fixture
def gwas_file(tmp_path):
    """
    A small GWAS file with a header, blank and short lines, one malformed
    record and records that fail each filter.
    """
    lines = [
        "SNP CHR POS ALLELE1 ALLELE0 A1FREQ INFO BETA SE P",
        "rs1 1 1000 A G 0.30 0.95 0.20 0.05 0.001",
        "rs2 1 2000 C T 0.40 0.90 -0.10 0.04 0.01",
        "",
        "rs3 2 3000 A C 0.20 0.50 0.30 0.05 0.001",   # INFO too low
        "rs4 2 4000 G T 0.25 0.99 0.01 0.05 0.5",     # p-value too high
        "rs5 3 5000 A T 0.001 0.99 0.40 0.05 0.0001", # MAF too low
        "short line",
        "rs6 3 6000 A G abc 0.99 0.40 0.05 0.001",    # malformed
        "rs7 4 7000 C G 0.60 0.85 0.50 0.10 0.02",
        "rs8 5 8000 T A 0.75\t0.99 0.35 0.07 0.0005",
    ]
    path = tmp_path / "gwas.txt"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path

"""
GWAS summary-statistic records.

One ``GwasSnp`` per line of a summary-statistics file with the columns
``SNP CHR POS ALLELE1 ALLELE0 A1FREQ INFO BETA SE P``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from ..algorithms.models import Point
from ..exceptions import DataValidationError, UnknownFeatureError

MIN_FIELDS = 10
POSITION_SCALE = 1_000_000_000.0
CHROMOSOME_COUNT = 24.0
NUMERIC_FIELDS = ("a1freq", "info_score", "beta", "se", "pval")


@dataclass(frozen=True)
class GwasSnp:
    """A single SNP association record."""

    snp: str
    chromosome: int
    position: int
    allele1: str
    allele0: str
    a1freq: float
    info_score: float
    beta: float
    se: float
    pval: float

    @property
    def z_score(self) -> float:
        return self.beta / self.se

    @property
    def log_p(self) -> float:
        return -math.log10(self.pval)

    @property
    def maf(self) -> float:
        """Minor allele frequency."""
        return min(self.a1freq, 1.0 - self.a1freq)

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "GwasSnp":
        """
        Parse a record from split line fields.

        Raises:
            DataValidationError: On too few fields, unparsable or
                non-finite numbers, non-positive SE, or a p-value outside (0, 1]
        """
        if len(fields) < MIN_FIELDS:
            raise DataValidationError(
                f"Expected at least {MIN_FIELDS} fields, got {len(fields)}"
            )
        try:
            snp = cls(
                snp=fields[0],
                chromosome=int(fields[1]),
                position=int(fields[2]),
                allele1=fields[3],
                allele0=fields[4],
                a1freq=float(fields[5]),
                info_score=float(fields[6]),
                beta=float(fields[7]),
                se=float(fields[8]),
                pval=float(fields[9]),
            )
        except ValueError as e:
            raise DataValidationError(
                f"Unparsable GWAS record: {e}", details={"snp": fields[0]}
            ) from e

        for name in NUMERIC_FIELDS:
            value = getattr(snp, name)
            if not math.isfinite(value):
                raise DataValidationError(
                    f"Non-finite {name}", details={"snp": snp.snp, name: value}
                )
        if not snp.se > 0:
            raise DataValidationError("SE must be positive", details={"snp": snp.snp, "se": snp.se})
        if not 0 < snp.pval <= 1:
            raise DataValidationError(
                "P-value must be in (0, 1]", details={"snp": snp.snp, "pval": snp.pval}
            )
        return snp

    def to_point(self, features: Sequence[str]) -> Point:
        """
        Build a Point from the named features, in the given order.

        Raises:
            UnknownFeatureError: If a name is not in FEATURE_EXTRACTORS
        """
        values = []
        for name in features:
            extractor = FEATURE_EXTRACTORS.get(name.upper())
            if extractor is None:
                raise UnknownFeatureError(
                    f"Unknown feature '{name}'",
                    details={"supported": ", ".join(FEATURE_EXTRACTORS)},
                )
            values.append(extractor(self))
        return Point(values)


FEATURE_EXTRACTORS: Dict[str, Callable[[GwasSnp], float]] = {
    "A1FREQ": lambda s: s.a1freq,
    "INFO": lambda s: s.info_score,
    "BETA": lambda s: s.beta,
    "SE": lambda s: s.se,
    "ZSCORE": lambda s: s.z_score,
    "LOGP": lambda s: s.log_p,
    "PVAL": lambda s: s.pval,
    "POSITION_NORM": lambda s: s.position / POSITION_SCALE,
    "CHR_NORM": lambda s: s.chromosome / CHROMOSOME_COUNT,
    "MAF": lambda s: s.maf,
}

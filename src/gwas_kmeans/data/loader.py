"""
Streaming loader for GWAS summary-statistic files.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Union

from ..algorithms.models import Point
from ..exceptions import DataValidationError
from ..utils.logging_config import get_logger
from .records import MIN_FIELDS, GwasSnp

if TYPE_CHECKING:
    from ..config import FilterOptions

logger = get_logger(__name__)


class GwasDataLoader:
    """
    Reads a whitespace-separated GWAS file line by line and filters records.

    Usage:
        loader = GwasDataLoader("summary_stats.txt")
        for snp in loader.iter_snps(min_info_score=0.9):
            ...
    """

    def __init__(self, file_path: Union[str, Path], has_header: bool = True):
        """
        Args:
            file_path: Path to the GWAS file
            has_header: Skip the first line of the file

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"GWAS file not found: {path}")
        self.file_path = path
        self.has_header = has_header

    def iter_snps(
        self,
        min_info_score: float = 0.8,
        max_p_value: float = 0.05,
        min_maf: float = 0.01,
        *,
        strict: bool = False,
    ) -> Iterator[GwasSnp]:
        """
        Yield records passing the INFO, p-value and MAF filters.

        Lines with fewer than 10 fields are ignored. Lines that have enough
        fields but fail to parse are logged and skipped, or raise when
        *strict* is set.

        Raises:
            DataValidationError: On a malformed record when strict=True
        """
        skipped = 0
        kept = 0
        with open(self.file_path, "r", encoding="utf-8") as fh:
            for line_no, line in enumerate(fh, start=1):
                if line_no == 1 and self.has_header:
                    continue
                fields = line.split()
                if len(fields) < MIN_FIELDS:
                    continue
                try:
                    snp = GwasSnp.from_fields(fields)
                except DataValidationError as e:
                    if strict:
                        e.details["line"] = line_no
                        raise
                    skipped += 1
                    logger.warning(f"{self.file_path.name}:{line_no}: {e}")
                    continue

                if (
                    snp.info_score >= min_info_score
                    and snp.pval <= max_p_value
                    and snp.maf >= min_maf
                ):
                    kept += 1
                    yield snp

        logger.info(
            f"Loaded {kept} SNPs from {self.file_path.name} ({skipped} malformed lines skipped)"
        )

    def load_points(self, options: "FilterOptions") -> List[Point]:
        """Load filtered records as points of the selected features."""
        return [
            snp.to_point(options.selected_features)
            for snp in self.iter_snps(
                min_info_score=options.min_info_score,
                max_p_value=options.max_p_value,
                min_maf=options.min_maf,
            )
        ]

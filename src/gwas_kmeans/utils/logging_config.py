"""
Logging configuration for gwas_kmeans.

Usage:
    from gwas_kmeans.utils.logging_config import get_logger, setup_logging

    setup_logging()              # once, at application entry
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
PACKAGE_LOGGER = "gwas_kmeans"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger for *name* (normally ``__name__``)."""
    return logging.getLogger(name)


def setup_logging(
    level: Optional[Union[str, int]] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Safe to call repeatedly: handlers are attached only on the first call,
    later calls just adjust the level.

    Args:
        level: Logging level name or number. Defaults to the
            ``GWAS_KMEANS_LOG_LEVEL`` environment variable, then INFO.
        log_file: Optional path of a file that receives the same records.

    Returns:
        The configured package logger.
    """
    global _configured

    if level is None:
        level = os.getenv("GWAS_KMEANS_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not _configured:
        formatter = logging.Formatter(LOG_FORMAT)

        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

        if log_file is not None:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        _configured = True

    return logger

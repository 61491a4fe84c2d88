"""Loguru sink configuration."""

import sys

from loguru import logger


def configure_logging(level: str) -> None:
    """Replace loguru's default sink with a single stderr sink.

    Args:
        level: Minimum level name, e.g. "INFO" or "DEBUG".
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper())

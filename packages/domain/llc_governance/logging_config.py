"""Logging configuration and utilities.

Modules log through ``get_logger(__name__)``. Nothing is configured on
import; applications call ``setup_logging()`` once if they want the
engine's output on a stream.
"""

import logging
from typing import Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_ROOT_LOGGER_NAME = "llc_governance"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Install a single stream handler on the package logger.

    Args:
        level: Level name; defaults to ``GovernanceSettings.log_level``

    Returns:
        The configured package logger
    """
    level_name = (level or get_settings().log_level).upper()
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)

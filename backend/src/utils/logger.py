"""Logging utilities for the timeline service."""
import logging
import sys
from typing import Optional

from config import LOG_LEVEL

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _resolve_level(level: Optional[str]) -> int:
    return getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a stdout logger for a timeline module.

    Args:
        name: Logger name (typically __name__)
        level: Level name overriding LOG_LEVEL, e.g. "DEBUG" for a diagnostic script

    Returns:
        logging.Logger with a single stdout handler
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(resolved)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(resolved)
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger

"""Logging setup for tutordesk."""

__all__ = ["get_logger", "configure_logging", "LOG_LEVEL_ENV"]

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "TUTORDESK_LOG_LEVEL"

_LOGGER_PREFIX = "tutordesk"
_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the tutordesk namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stderr handler on the tutordesk root logger.

    Args:
        level: Level name (e.g. "INFO"). If None, reads TUTORDESK_LOG_LEVEL,
            then defaults to WARNING.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")

    root = logging.getLogger(_LOGGER_PREFIX)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False

"""Logging setup shared by every module."""

import logging
from typing import Optional

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a single stderr handler.

    Args:
        level: Level name (defaults to LOG_LEVEL)
    """
    level = level or LOG_LEVEL
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers in case of re-init
    for handler in list(root.handlers):
        root.removeHandler(handler)

    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(stream)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    return logging.getLogger(name)

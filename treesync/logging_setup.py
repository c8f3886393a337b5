"""Logging configuration for the command-line entrypoint.

Library modules only create module-level loggers; handlers are installed here,
once, by the CLI.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"

_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_HANDLER_ATTR = "_treesync_handler"


def parse_level(level: str | int | None) -> int:
    """Map a level name (case-insensitive) or number to a logging level."""
    if isinstance(level, int):
        return level
    if not level:
        return logging.WARNING
    return _LEVELS.get(str(level).strip().upper(), logging.WARNING)


def configure_logging(level: str | int | None = "WARNING", *, stream=None) -> logging.Logger:
    """Install one stderr handler on the ``treesync`` logger (idempotent)."""
    logger = logging.getLogger("treesync")
    logger.setLevel(parse_level(level))
    for handler in logger.handlers:
        if getattr(handler, _HANDLER_ATTR, False):
            return logger

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = ["LOG_FORMAT", "parse_level", "configure_logging"]

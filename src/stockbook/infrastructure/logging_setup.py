"""Logging configuration for the ``stockbook`` logger tree."""

from __future__ import annotations

import logging

_LOGGER_NAME = "stockbook"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """Attach one stderr handler to the package logger; safe to call twice."""
    logger = logging.getLogger(_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    return logger

"""Logging configuration helpers for the Kambaz backend."""

from __future__ import annotations

import logging
from logging import Logger

from kambaz.config import LOG_LEVEL


def configure_logging() -> Logger:
    """Configure basic logging for the application and return the package logger."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("kambaz")

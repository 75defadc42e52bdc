"""Logging setup for the spectral catalog."""

from __future__ import annotations

import logging
import logging.config
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``spectral`` namespace."""
    return logging.getLogger(name or "spectral")


def init_logging(level: str = "WARNING") -> None:
    """Configure console logging for the ``spectral`` loggers.

    Raises:
        ValueError: If ``level`` is not a known logging level name.
    """
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "spectral": {
                    "handlers": ["console"],
                    "level": level,
                    "propagate": False,
                },
            },
        }
    )

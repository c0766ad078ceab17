"""Logging setup shared by the CLI and the web app."""

from __future__ import annotations

import logging.config
import os
from typing import Optional

LOG_LEVEL_ENV = "EMI_CALC_LOG_LEVEL"


def build_logging_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "{levelname} {asctime} {name} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
            },
        },
        "loggers": {
            "emi_calc": {"handlers": ["console"], "level": level, "propagate": False},
            "emi_calc_web": {"handlers": ["console"], "level": level, "propagate": False},
        },
    }


def configure_logging(level: Optional[str] = None) -> str:
    """Configure the package loggers and return the level applied.

    The level comes from ``level`` or the ``EMI_CALC_LOG_LEVEL`` environment
    variable, defaulting to ``INFO``.
    """
    resolved = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    if not isinstance(logging.getLevelName(resolved), int):
        resolved = "INFO"
    logging.config.dictConfig(build_logging_config(resolved))
    return resolved

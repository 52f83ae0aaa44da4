"""Logging configuration.

Console output only: plain text in development, JSON lines when ``LOG_JSON``
is enabled (production).
"""

from __future__ import annotations

import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from .datetime_utils import to_iso_z

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ConsoleJsonFormatter(JsonFormatter):
    """JSON formatter with stable timestamp/level/logger fields."""

    def add_fields(self, log_data: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_data, record, message_dict)
        log_data["timestamp"] = to_iso_z(datetime.fromtimestamp(record.created, tz=timezone.utc))
        log_data["level"] = record.levelname
        log_data["logger"] = record.name


def build_logging_config(*, level: str = "INFO", json_format: bool = False) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": PLAIN_FORMAT},
            "json": {"()": ConsoleJsonFormatter, "format": "%(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if json_format else "standard",
            },
        },
        "loggers": {
            "werkzeug": {"level": "WARNING"},
        },
        "root": {"handlers": ["console"], "level": level.upper()},
    }


def setup_logging(*, level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """Configure application logging; safe to call more than once."""
    logging.config.dictConfig(build_logging_config(level=level, json_format=json_format))
    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized with level %s", level.upper())
    return logger

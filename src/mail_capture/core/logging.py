"""Logging configuration helpers."""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any

from .config import LoggingSettings

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False)


def _formatter(structured: bool) -> dict[str, Any]:
    """Return a dictConfig formatter fragment."""
    if structured:
        return {"()": JsonFormatter}
    return {"format": _PLAIN_FORMAT}


def build_logging_config(settings: LoggingSettings) -> dict[str, Any]:
    """Translate logging settings into a ``dictConfig`` mapping."""
    level = settings.level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": _formatter(settings.structured),
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
    }


def configure_logging(settings: LoggingSettings) -> None:
    """Configure application logging according to provided settings."""
    logging.config.dictConfig(build_logging_config(settings))


__all__ = ["JsonFormatter", "build_logging_config", "configure_logging"]

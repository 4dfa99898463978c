"""Process-wide logging setup."""

from __future__ import annotations

import logging.config
from pathlib import Path
from typing import Any

from salesdesk_app.core.config import LoggingConfig

LOG_FORMAT = "{levelname} {asctime} {name} {message}"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 5


def build_logging_dict(config: LoggingConfig) -> dict[str, Any]:
    """Return a dictConfig mapping: console always, rotating file when configured."""
    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    }
    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": config.file,
            "formatter": "verbose",
            "maxBytes": LOG_FILE_MAX_BYTES,
            "backupCount": LOG_FILE_BACKUP_COUNT,
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {"format": LOG_FORMAT, "style": "{"},
        },
        "handlers": handlers,
        "loggers": {
            "salesdesk_app": {
                "handlers": list(handlers),
                "level": config.level,
                "propagate": False,
            },
        },
    }


def configure_logging(config: LoggingConfig) -> None:
    logging.config.dictConfig(build_logging_dict(config))

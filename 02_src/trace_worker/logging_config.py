"""JSON logging for the trace conclusion worker.

Every record is written as one JSON object per line, to stdout and to a
rotating file. Counts and trace ids passed as ``extra={"context": {...}}``
end up under the ``context`` key.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import WorkerConfig

SERVICE_NAME = "trace-conclusion-worker"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Per-request chatter from the HTTP stack drowns out cycle summaries
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """Renders a record as a single-line JSON object."""

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self._service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "service": self._service,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict) and context:
            entry["context"] = context
        elif context is not None:
            entry["context"] = {"value": context}

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def build_logging_config(config: WorkerConfig) -> dict[str, Any]:
    """dictConfig mapping for the worker's level and log file."""
    noisy_level = "DEBUG" if config.log_level == "DEBUG" else "WARNING"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JSONFormatter},
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": config.log_file,
                "maxBytes": LOG_FILE_MAX_BYTES,
                "backupCount": LOG_FILE_BACKUPS,
                "formatter": "json",
                "encoding": "utf-8",
            },
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {name: {"level": noisy_level} for name in NOISY_LOGGERS},
        "root": {
            "level": config.log_level,
            "handlers": ["file", "console"],
        },
    }


def setup_logging(config: WorkerConfig) -> None:
    """Install JSON logging using the level and file from ``config``."""
    Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(config))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

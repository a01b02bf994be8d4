"""JSON log lines for the collector process and the trace console."""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH, resolve_path

# Loggers of the ASGI server, re-routed through our handlers
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Records logged with a ``context`` mapping (the console sink passes the
    trace document there) also surface ``trace_id`` and ``trace_level``, so
    a trace's own level (``warn``, ``success``...) survives the mapping onto
    logging levels.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        context = getattr(record, "context", None)
        if context is not None:
            entry["context"] = context
            if isinstance(context, dict):
                if "id" in context:
                    entry["trace_id"] = context["id"]
                if context.get("level"):
                    entry["trace_level"] = context["level"]

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(log_level: str | None = None, log_file: str | Path | None = None) -> Path:
    """Configure the root logger; LOG_LEVEL and REMLOG_LOG_FILE fill in unset arguments.

    Returns the log file in use.
    """
    log_level = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_path = Path(log_file) if log_file else resolve_path(
        os.getenv("REMLOG_LOG_FILE"), DEFAULT_LOG_PATH
    )
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "remlog.logging_config.JSONFormatter"},
            },
            "handlers": {
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": str(log_path),
                    "maxBytes": 10 * 1024 * 1024,
                    "backupCount": 5,
                    "formatter": "json",
                    "encoding": "utf-8",
                },
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                name: {"handlers": [], "propagate": True} for name in SERVER_LOGGERS
            },
            "root": {
                "level": log_level,
                "handlers": ["file", "stdout"],
            },
        }
    )
    return log_path


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

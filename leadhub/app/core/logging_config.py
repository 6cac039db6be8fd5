"""
Logging setup for the CRM backend.

`configure_logging()` runs once when the app module is imported. Level and
format come from Settings (LOG_LEVEL, LOG_FORMAT). Log calls may attach CRM
context through ``extra=`` (request method/path, account_id, client_id); both
formatters render whichever of those fields a record carries.
"""
import json
import logging
import sys
from datetime import datetime, timezone

from leadhub.app.core.settings import get_settings

CONTEXT_FIELDS = ("method", "path", "account_id", "client_id")

_NOISY_LOGGERS = [
    "uvicorn.access",
    "passlib",
    "sqlalchemy.engine",
]


def record_context(record: logging.LogRecord) -> dict:
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if getattr(record, name, None) is not None}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, tagged with the app name and environment."""

    def __init__(self, app_name: str = "", environment: str = ""):
        super().__init__()
        self.app_name = app_name
        self.environment = environment

    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "app": self.app_name,
            "env": self.environment,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(record_context(record))
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with context appended as key=value pairs."""

    def __init__(self):
        super().__init__("[%(asctime)s] %(levelname)s %(name)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record):
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        first, newline, rest = line.partition("\n")
        return f"{first} [{pairs}]{newline}{rest}"


def configure_logging(settings=None):
    """Install a single stderr handler on the root logger."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if settings.log_format.lower() == "json":
        handler.setFormatter(JSONFormatter(settings.app_name, settings.environment))
    else:
        handler.setFormatter(TextFormatter())
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

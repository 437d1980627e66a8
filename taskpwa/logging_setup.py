"""Logging configuration."""
import json
import logging
import sys
from datetime import datetime, timezone

from taskpwa.config import Settings


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(settings: Settings) -> None:
    """Configure the root logger once, according to LOG_LEVEL and LOG_FORMAT."""
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL.upper())

    # Replace our own handler on app reload, leave foreign handlers alone.
    for handler in list(root.handlers):
        if getattr(handler, "_taskpwa", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler._taskpwa = True
    if settings.LOG_FORMAT.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.addHandler(handler)

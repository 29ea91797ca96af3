"""
Logging Utility.

One JSON document per record on stdout. Callers pass context as keyword
arguments; a logger can be bound to extra context that is merged into every
record it emits.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

from tasksync.utils.dates import utc_now


class JsonFormatter(logging.Formatter):
    """Render the record's structured payload, adding a traceback when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload = dict(getattr(record, "payload", None) or {"message": record.getMessage()})
        if record.exc_info:
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StructuredLogger:
    """Structured logger for the API process."""

    def __init__(self, name: str, level: int = logging.INFO, context: Optional[Dict[str, Any]] = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.context = dict(context or {})

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JsonFormatter())
            self.logger.addHandler(handler)
            self.logger.propagate = False

    def bind(self, **context) -> "StructuredLogger":
        """Child logger sharing the handler, with `context` added to every record."""
        return StructuredLogger(self.logger.name, self.logger.level, {**self.context, **context})

    def _emit(self, level: int, message: str, exc_info: bool = False, **kwargs):
        if not self.logger.isEnabledFor(level):
            return
        payload = {
            "timestamp": utc_now().isoformat(),
            "level": logging.getLevelName(level),
            "service": self.logger.name,
            "message": message,
            **self.context,
            **kwargs,
        }
        self.logger.log(level, message, exc_info=exc_info, extra={"payload": payload})

    def debug(self, message: str, **kwargs):
        self._emit(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._emit(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._emit(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._emit(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log at ERROR with the active exception's traceback."""
        self._emit(logging.ERROR, message, exc_info=True, **kwargs)


def get_logger(service_name: str, level: str = "INFO") -> StructuredLogger:
    """
    Build a logger for the given service.

    Args:
        service_name: Name of the service
        level: Level name such as "INFO" or "DEBUG"

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(service_name, logging.getLevelName(level.upper()))

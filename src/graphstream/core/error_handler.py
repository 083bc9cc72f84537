"""Centralized logging for graphstream.

This module provides:
- Structured logging tagged with the current stream id
- Redaction of streamed content and other sensitive fields
- Environment-aware logging setup (JSON in production, readable in dev)
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from graphstream.core.config import get_settings
from graphstream.core.exceptions import GraphStreamError
from graphstream.core.security_config import is_sensitive_key


# Context variable for the stream id so every log line of one stream correlates
_stream_id_var: ContextVar[str | None] = ContextVar("stream_id", default=None)

logger = logging.getLogger(__name__)


def get_stream_id() -> str:
    """Get or create the stream id for the current context."""
    stream_id: str | None = _stream_id_var.get()
    if stream_id is None or stream_id == "":
        new_id = str(uuid.uuid4())
        _stream_id_var.set(new_id)
        return new_id
    return stream_id


def set_stream_id(stream_id: str | None) -> None:
    """Set the stream id for the current context."""
    _stream_id_var.set(stream_id)


class StructuredLogger:
    """Structured logger that includes stream ids and sanitized data."""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def _log_with_context(
        self,
        level: int,
        message: str,
        extra_data: dict[str, Any] | None = None,
        exc_info: bool = False,
    ) -> None:
        """Log with stream id and structured data."""
        if not self.logger.isEnabledFor(level):
            return

        stream_id = get_stream_id()
        sanitized_data = self._sanitize_data(extra_data or {})

        log_data = {
            "stream_id": stream_id,
            "message": message,
            **sanitized_data,
        }

        settings = get_settings()
        if settings.ENVIRONMENT == "production":
            # JsonFormatter merges `extra` keys into the emitted object
            self.logger.log(
                level,
                message,
                extra={"structured_data": log_data},
                exc_info=exc_info,
            )
        else:
            self.logger.log(
                level,
                f"[{stream_id}] {message}",
                extra={"structured_data": log_data},
                exc_info=exc_info,
            )

    def _sanitize_data(self, data: dict[str, Any]) -> dict[str, Any]:
        """Remove or mask sensitive data from log entries."""
        if not isinstance(data, dict) or not data:
            return {}

        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            if is_sensitive_key(key):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = self._sanitize_value(value)
        return sanitized

    def _sanitize_value(self, value: Any) -> Any:
        """Sanitize a single value which may be a dict, list, or primitive."""
        if isinstance(value, dict):
            return self._sanitize_data(value)
        if isinstance(value, list | tuple):
            return [self._sanitize_value(item) for item in value]
        if isinstance(value, GraphStreamError):
            return {"error_code": value.error_code, "error": value.message}
        return value

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug level message."""
        self._log_with_context(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info level message."""
        self._log_with_context(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning level message."""
        self._log_with_context(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error level message."""
        self._log_with_context(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._log_with_context(logging.ERROR, message, kwargs, exc_info=True)


def setup_logging() -> None:
    """Configure root logging once; JSON in production, readable elsewhere."""
    settings = get_settings()

    if settings.LOG_LEVEL:
        log_level = logging.getLevelName(settings.LOG_LEVEL)
    else:
        log_level = (
            logging.DEBUG if settings.ENVIRONMENT == "development" else logging.INFO
        )
    root_logger = logging.getLogger()

    # Idempotent: leave an already-configured root alone
    if root_logger.handlers:
        return

    formatter: logging.Formatter
    if settings.ENVIRONMENT == "production":
        formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)

    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)
    logger.debug("Logging configured for %s", settings.APP_NAME)

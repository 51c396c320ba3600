"""Structured JSON logging for the jewel matcher.

Every record carries the correlation id of the request it belongs to, and
anything that could hold shopper data (photos, pixel buffers, URLs, emails) is
scrubbed before it reaches a handler.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord has; anything else on a record came in via ``extra``.
_RESERVED_RECORD_KEYS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}
_SENSITIVE_KEYS = frozenset(
    {
        "image",
        "image_bytes",
        "pixels",
        "image_url",
        "link",
        "email",
        "description",
    }
)
_EMAIL_RE = re.compile(r"[\w.\-+]+@[\w\-]+(\.[\w\-]+)+")
_URL_RE = re.compile(r"https?://\S+", re.IGNORECASE)


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        for key, value in vars(record).items():
            if key in _RESERVED_RECORD_KEYS or key in payload:
                continue
            payload[key] = redact_for_log(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Route the root logger through a single JSON stream handler."""

    desired = level or os.getenv("LOG_LEVEL", "INFO")
    if isinstance(desired, str):
        desired = desired.upper()
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(desired)


def _redact_string(value: str) -> str:
    value = _EMAIL_RE.sub("[redacted-email]", value)
    return _URL_RE.sub("[redacted-url]", value)


def redact_for_log(payload: Any) -> Any:
    """Return a log-safe copy of ``payload``.

    Raw image bytes and pixel arrays are summarised by size, never dumped.
    """

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _redact_string(payload)
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return f"[{len(payload)} bytes]"
    if hasattr(payload, "shape") and hasattr(payload, "dtype"):
        return f"[array shape={tuple(payload.shape)} dtype={payload.dtype}]"
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item) for item in payload]
    return _redact_string(str(payload))


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring the root logger on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Bind ``correlation_id`` (or a fresh one) unless one is already bound."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    current = uuid.uuid4().hex
    CORRELATION_ID.set(current)
    return current


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block."""

    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log a named event with scrubbed structured fields."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    extra = {
        # LogRecord refuses extras that shadow its own attributes.
        (f"{key}_" if key in _RESERVED_RECORD_KEYS else key): value
        for key, value in redact_for_log(fields).items()
    }
    extra.update(event=event, correlation_id=correlation_id)
    logger.log(level, event, exc_info=exc_info, extra=extra)


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id around one request and log how long it took."""

    logger = logging.getLogger(__name__)
    start = time.perf_counter()
    with correlation_context(correlation_id) as scoped_id:
        log_event(logger, logging.DEBUG, "operation_started", operation=name)
        try:
            yield scoped_id
        except Exception:
            log_event(
                logger,
                logging.ERROR,
                "operation_failed",
                operation=name,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                exc_info=True,
            )
            raise
        log_event(
            logger,
            logging.INFO,
            "operation_completed",
            operation=name,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "redact_for_log",
    "operation_context",
]

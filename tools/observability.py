"""Instrumentation for collaborator calls (catalog queries, image IO)."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from matcher_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

_MAX_PREVIEW_KEYS = 6


def _describe_arguments(args: tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Summarise call arguments without logging their bodies.

    ``self`` and other objects collapse to their type name; the logging layer
    scrubs byte payloads and URLs from what is left.
    """

    preview: Dict[str, Any] = {}
    for index, value in enumerate(args):
        preview[f"arg{index}"] = value if isinstance(value, (bytes, str, int, float)) else type(value).__name__
    for key, value in list(kwargs.items())[:_MAX_PREVIEW_KEYS]:
        preview[key] = value
    if len(kwargs) > _MAX_PREVIEW_KEYS:
        preview["truncated"] = True
    return preview


def _describe_result(result: Any) -> Dict[str, Any]:
    if isinstance(result, (list, tuple)):
        return {"result_count": len(result)}
    if isinstance(result, (bytes, bytearray)):
        return {"result_bytes": len(result)}
    shape = getattr(result, "shape", None)
    if shape is not None:
        return {"result_shape": list(shape)}
    return {}


def instrument_tool(tool_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, completion (with timing and result size) and failure of a call."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.DEBUG,
                "tool_call_started",
                tool=tool_name,
                correlation_id=correlation_id,
                arguments=_describe_arguments(args, kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "tool_call_failed",
                    tool=tool_name,
                    correlation_id=correlation_id,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    error_type=type(exc).__name__,
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.DEBUG,
                "tool_call_completed",
                tool=tool_name,
                correlation_id=correlation_id,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                **_describe_result(result),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_tool"]

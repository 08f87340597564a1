"""Span helpers built on opentelemetry-api.

Without a configured SDK provider these produce non-recording spans, so the
flow client can always be traced at negligible cost.
"""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_TRACER_NAME = "flowtrack"

# Only these kwarg names are copied onto spans; point/assertion payloads never are.
_SAFE_SPAN_ATTR_KEYS = frozenset({
    "name", "identifier", "flow_id", "flow_name", "status", "service",
    "limit", "skip", "page", "search",
})


def _set_safe_span_attrs(span: trace.Span, kwargs: dict[str, Any]) -> None:
    for key, value in kwargs.items():
        if key in _SAFE_SPAN_ATTR_KEYS and value is not None:
            span.set_attribute(f"arg.{key}", str(value))


def _record_error(span: trace.Span, exc: BaseException) -> None:
    span.set_status(Status(StatusCode.ERROR, str(exc)))
    span.record_exception(exc)


def traced(
    operation_name: str | None = None,
    attributes: dict[str, str | int | float | bool] | None = None,
) -> Callable:
    """Decorator that runs a function (sync or async) inside a span.

    Args:
        operation_name: Span name (defaults to module.qualname).
        attributes: Static attributes set on every span.
    """

    def decorator(func: Callable) -> Callable:
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"

        def _start():
            return trace.get_tracer(_TRACER_NAME).start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            )

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _start() as span:
                span.set_attributes(attributes or {})
                _set_safe_span_attrs(span, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _record_error(span, e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _start() as span:
                span.set_attributes(attributes or {})
                _set_safe_span_attrs(span, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _record_error(span, e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span, if it is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)


def get_trace_id() -> str | None:
    """Return the current trace ID as 32-char hex, or None."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        return format(ctx.trace_id, "032x")
    return None

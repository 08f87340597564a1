"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from flowtrack.shared.telemetry.logging import setup_logging
from flowtrack.shared.telemetry.tracing import (
    add_span_attributes,
    get_trace_id,
    traced,
)

__all__ = [
    "setup_logging",
    "traced",
    "add_span_attributes",
    "get_trace_id",
]

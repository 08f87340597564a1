"""Tests for the traced decorator without a configured SDK provider."""

import pytest

from flowtrack.shared.telemetry import add_span_attributes, get_trace_id, traced


@traced("test.sync")
def _double(x: int) -> int:
    return x * 2


@traced()
async def _fail(name: str) -> None:
    raise RuntimeError(name)


def test_sync_function_result_passes_through() -> None:
    assert _double(4) == 8
    assert _double.__name__ == "_double"


async def test_async_exception_propagates() -> None:
    with pytest.raises(RuntimeError, match="orders"):
        await _fail(name="orders")


def test_helpers_are_noops_without_recording_span() -> None:
    add_span_attributes(**{"flow.name": "orders"})
    assert get_trace_id() is None


def test_disabled_telemetry_sets_nothing_up() -> None:
    from flowtrack.core.config import FlowSettings
    from flowtrack.shared.telemetry.telemetry import TelemetryConfig

    config = TelemetryConfig.from_settings(FlowSettings(telemetry_enabled=False))
    assert config.setup_telemetry() is None
    config.shutdown()


def test_exporter_selection() -> None:
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter

    from flowtrack.shared.telemetry.telemetry import TelemetryConfig

    config = TelemetryConfig("flowtrack", "1.0.0")
    assert config._exporter("none", None) is None
    assert isinstance(config._exporter("console", None), ConsoleSpanExporter)
    assert isinstance(config._exporter("otlp", None), ConsoleSpanExporter)

"""Tests for FlowSettings and FlowClientBuilder."""

from datetime import timedelta

import pytest

from flowtrack.application.use_cases.flows import FlowClient, FlowClientBuilder
from flowtrack.core.config import FlowSettings
from flowtrack.domain.exceptions import ConfigurationException

_URL = "sqlite+aiosqlite:///unused.db"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    """Keep FLOWTRACK_* variables from the host out of these tests."""
    for key in ("FLOWTRACK_DATABASE_URL", "FLOWTRACK_PRODUCTION", "FLOWTRACK_MAX_EXECUTIONS"):
        monkeypatch.delenv(key, raising=False)


def test_settings_defaults() -> None:
    settings = FlowSettings(_env_file=None)
    assert settings.production is False
    assert settings.max_executions == 0
    assert settings.cache_enabled is False
    assert settings.max_cache_size == 1000
    assert settings.timeout_seconds == 30.0


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("FLOWTRACK_PRODUCTION", "true")
    monkeypatch.setenv("FLOWTRACK_MAX_EXECUTIONS", "7")
    settings = FlowSettings(_env_file=None)
    assert settings.production is True
    assert settings.max_executions == 7


def test_otlp_exporter_requires_endpoint() -> None:
    with pytest.raises(ValueError):
        FlowSettings(_env_file=None, telemetry_enabled=True, telemetry_exporter="otlp")


def test_build_without_database_raises() -> None:
    with pytest.raises(ConfigurationException, match="database connection is required"):
        FlowClientBuilder().with_service_name("svc").build()


def test_build_wraps_validation_errors() -> None:
    builder = FlowClientBuilder().with_database_url(_URL).with_max_executions(-1)
    with pytest.raises(ConfigurationException) as exc_info:
        builder.build()
    assert exc_info.value.error_code == "CONFIGURATION_ERROR"
    assert exc_info.value.__cause__ is not None


def test_build_collects_options() -> None:
    settings = (
        FlowClientBuilder()
        .with_database_url(_URL)
        .with_service_name("billing")
        .with_production_mode()
        .with_max_executions(10)
        .with_schema_validation()
        .with_batch_size(50)
        .with_caching(max_size=5)
        .with_timeout(timedelta(seconds=2))
        .with_connection_pool(5, 10, recycle=timedelta(minutes=5))
        .build_settings()
    )
    assert settings.service_name == "billing"
    assert settings.production is True
    assert settings.max_executions == 10
    assert settings.schema_enabled is True
    assert settings.batch_size == 50
    assert settings.cache_enabled is True
    assert settings.max_cache_size == 5
    assert settings.timeout_seconds == 2.0
    assert (settings.db_pool_size, settings.db_max_overflow) == (5, 10)
    assert settings.db_pool_recycle_seconds == 300


def test_caching_with_zero_size_is_rejected() -> None:
    with pytest.raises(ConfigurationException):
        FlowClientBuilder().with_database_url(_URL).with_caching(max_size=0).build()


def test_build_returns_client_with_logger() -> None:
    import logging

    logger = logging.getLogger("billing.flows")
    client = (
        FlowClientBuilder()
        .with_database_url(_URL)
        .with_caching(max_size=3)
        .with_logger(logger)
        .build()
    )
    assert isinstance(client, FlowClient)
    assert client.logger is logger
    assert client.cache.is_available()


def test_zero_cache_size_allowed_when_caching_disabled() -> None:
    client = (
        FlowClientBuilder()
        .with_database_url(_URL)
        .with_caching(enabled=False, max_size=0)
        .build()
    )
    assert client.settings.max_cache_size == 0
    assert client.cache.is_available() is False

"""Fluent construction of a FlowClient."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Self

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncEngine

from flowtrack.application.use_cases.flows.client import FlowClient
from flowtrack.core.config import FlowSettings
from flowtrack.domain.exceptions import ConfigurationException


class FlowClientBuilder:
    """Collects client options and produces a FlowClient.

    Options not set here fall back to FLOWTRACK_* environment variables and
    then to FlowSettings defaults.

    Example:
        client = (
            FlowClientBuilder()
            .with_database_url("postgresql+asyncpg://localhost/flows")
            .with_service_name("billing")
            .with_max_executions(100)
            .with_caching(max_size=500)
            .build()
        )
    """

    def __init__(self) -> None:
        self._options: dict[str, Any] = {}
        self._engine: AsyncEngine | None = None
        self._logger: logging.Logger | None = None

    def with_database_url(self, url: str) -> Self:
        self._options["database_url"] = url
        return self

    def with_engine(self, engine: AsyncEngine) -> Self:
        """Share an existing engine (the client will not dispose it)."""
        self._engine = engine
        return self

    def with_service_name(self, service_name: str) -> Self:
        self._options["service_name"] = service_name
        return self

    def with_production_mode(self, enabled: bool = True) -> Self:
        self._options["production"] = enabled
        return self

    def with_max_executions(self, max_executions: int) -> Self:
        """Cap total flows per name; 0 disables the cap."""
        self._options["max_executions"] = max_executions
        return self

    def with_schema_validation(self, enabled: bool = True) -> Self:
        self._options["schema_enabled"] = enabled
        return self

    def with_batch_size(self, size: int) -> Self:
        self._options["batch_size"] = size
        return self

    def with_caching(self, enabled: bool = True, max_size: int = 1000) -> Self:
        self._options["cache_enabled"] = enabled
        self._options["max_cache_size"] = max_size
        return self

    def with_timeout(self, timeout: float | timedelta) -> Self:
        """Deadline for each storage operation, in seconds or as a timedelta."""
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        self._options["timeout_seconds"] = timeout
        return self

    def with_connection_pool(
        self,
        pool_size: int,
        max_overflow: int,
        recycle: float | timedelta | None = None,
    ) -> Self:
        """Size the engine pool (ignored when an engine is injected or on SQLite)."""
        self._options["db_pool_size"] = pool_size
        self._options["db_max_overflow"] = max_overflow
        if recycle is not None:
            if isinstance(recycle, timedelta):
                recycle = recycle.total_seconds()
            self._options["db_pool_recycle_seconds"] = int(recycle)
        return self

    def with_logger(self, logger: logging.Logger) -> Self:
        self._logger = logger
        return self

    def build_settings(self) -> FlowSettings:
        """Validate collected options into FlowSettings.

        Raises:
            ConfigurationException: An option is out of range.
        """
        try:
            return FlowSettings(**self._options)
        except ValidationError as e:
            raise ConfigurationException(f"invalid flow client options: {e}") from e

    def build(self) -> FlowClient:
        """Return a FlowClient (not yet connected).

        Raises:
            ConfigurationException: Invalid options, or neither a database URL
                nor an engine was given.
        """
        settings = self.build_settings()
        if self._engine is None and not settings.database_url:
            raise ConfigurationException("database connection is required")
        return FlowClient(settings, engine=self._engine, logger=self._logger)

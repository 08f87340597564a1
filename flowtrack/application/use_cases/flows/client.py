"""Flow client: entry point for recording and reconciling flows.

A client is bound to one FlowSettings. It owns its cache, its storage and,
unless an engine is injected, its SQLAlchemy engine. Several clients with
different settings can live in one process.

Example:
    async with FlowClient(FlowSettings(database_url=url, service_name="orders")) as client:
        flow = await client.start("order-created", order_id)
        await flow.create_point("order persisted", {"id": order_id, "status": "NEW"})
        ...
        result = await flow.finish()
"""

from __future__ import annotations

import logging
from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncEngine

from flowtrack.application.dtos.flow import FlowRecord
from flowtrack.application.interfaces.repositories import FlowStorageProtocol
from flowtrack.application.use_cases.flows.instance import FlowInstance
from flowtrack.core.config import FlowSettings
from flowtrack.domain.enums import FlowStatus
from flowtrack.domain.exceptions import (
    ConfigurationException,
    FlowNotFoundException,
    StorageFailureException,
)
from flowtrack.infrastructure.cache import FlowCache, FlowCacheProtocol
from flowtrack.infrastructure.persistence.database import create_engine
from flowtrack.infrastructure.persistence.repositories.flow_storage import (
    SqlFlowStorage,
)
from flowtrack.shared.telemetry.tracing import traced

package_logger = logging.getLogger("flowtrack")


class FlowClient:
    """Lifecycle manager for named flows (start, get_flow) and their instances."""

    def __init__(
        self,
        settings: FlowSettings,
        engine: AsyncEngine | None = None,
        logger: logging.Logger | None = None,
        *,
        storage: FlowStorageProtocol | None = None,
        cache: FlowCacheProtocol | None = None,
    ) -> None:
        """Initialize client (no I/O; call connect() or use `async with`).

        Args:
            settings: Client configuration.
            engine: Existing engine to share; the client will not dispose it.
            logger: Logger for lifecycle messages (default: "flowtrack").
            storage: Storage implementation, replacing the SQL one.
            cache: Cache implementation, replacing the in-memory one.

        Raises:
            ConfigurationException: No storage, engine or database_url given.
        """
        self.settings = settings
        self.logger = logger or package_logger
        self.cache: FlowCacheProtocol = cache or FlowCache(
            enabled=settings.cache_enabled, max_size=settings.max_cache_size
        )
        if storage is None:
            if engine is None and not settings.database_url:
                raise ConfigurationException(
                    "database connection is required (database_url or engine)"
                )
            storage = SqlFlowStorage(
                engine or create_engine(settings),
                settings.timeout_seconds,
                owns_engine=engine is None,
            )
        self.storage: FlowStorageProtocol = storage
        self._connected = False

    async def connect(self) -> FlowClient:
        """Bootstrap the schema (skipped in production mode). Idempotent."""
        if not self._connected:
            if not self.settings.production:
                await self.storage.apply_schema()
            self._connected = True
        return self

    async def close(self) -> None:
        """Clear the cache and release storage resources."""
        self.cache.clear()
        await self.storage.close()
        self._connected = False
        self.logger.info("FlowClient closed")

    async def __aenter__(self) -> FlowClient:
        return await self.connect()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _skipped(self, name: str, status: FlowStatus) -> FlowInstance:
        return FlowInstance(self, FlowRecord(name=name, status=status))

    async def _limit_reached(self, name: str) -> bool:
        limit = self.settings.max_executions
        if limit <= 0:
            return False
        count = await self.storage.count_flows_by_name(name)
        if count >= limit:
            self.logger.info("Limit reached for flow '%s' (%d/%d)", name, count, limit)
            return True
        return False

    @traced("flowtrack.flow.start")
    async def start(self, name: str, identifier: str | None = None) -> FlowInstance:
        """Start a new execution of flow `name`, superseding any ACTIVE one.

        Args:
            name: Flow name.
            identifier: Optional scope (e.g. order id); None or "" is unscoped.

        Returns:
            Instance for the new ACTIVE flow, or a SKIPPED / SKIPPED_LIMIT
            instance (not persisted) in production mode or past the limit.

        Raises:
            StorageFailureException: Counting, interrupting or inserting failed.
        """
        if self.settings.production:
            self.logger.debug("Production mode: skipping flow '%s'", name)
            return self._skipped(name, FlowStatus.SKIPPED)
        if await self._limit_reached(name):
            return self._skipped(name, FlowStatus.SKIPPED_LIMIT)

        flow = await self.storage.start_flow(name, identifier, self.settings.service_name)
        self.cache.delete(name, identifier)
        self.cache.set(name, identifier, flow)
        self.logger.info("Flow started: '%s' (id=%s)", name, flow.id)
        return FlowInstance(self, flow)

    @traced("flowtrack.flow.get")
    async def get_flow(self, name: str, identifier: str | None = None) -> FlowInstance:
        """Return the ACTIVE execution of flow `name` (cache first).

        Raises:
            FlowNotFoundException: No ACTIVE flow and the limit is not reached.
            StorageFailureException: The lookup failed.
        """
        if self.settings.production:
            return self._skipped(name, FlowStatus.SKIPPED)

        cached = self.cache.get(name, identifier)
        if cached is not None:
            self.logger.debug("Cache hit for flow '%s'", name)
            return FlowInstance(self, cached)

        try:
            flow = await self.storage.find_active_flow(name, identifier)
        except FlowNotFoundException:
            try:
                limit_reached = await self._limit_reached(name)
            except StorageFailureException as e:
                self.logger.warning("Limit check failed for flow '%s': %s", name, e)
                limit_reached = False
            if limit_reached:
                return self._skipped(name, FlowStatus.SKIPPED_LIMIT)
            raise

        self.cache.set(name, identifier, flow)
        return FlowInstance(self, flow)

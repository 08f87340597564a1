"""Pytest configuration and fixtures for flowtrack.

Storage and dashboard tests run against a SQLite file database under
tmp_path (sqlite+aiosqlite); lifecycle unit tests use the in-memory storage
below or AsyncMock.
"""

import itertools
from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

from flowtrack.application.dtos.flow import (
    AssertionRecord,
    FlowRecord,
    PointCreate,
    PointRecord,
)
from flowtrack.application.use_cases.flows import FlowClient
from flowtrack.core.config import FlowSettings
from flowtrack.domain.enums import FlowStatus
from flowtrack.domain.exceptions import FlowNotFoundException
from flowtrack.domain.values import JsonValue
from flowtrack.infrastructure.persistence.database import create_engine
from flowtrack.infrastructure.persistence.repositories import SqlFlowStorage
from flowtrack.main import create_app
from flowtrack.shared.utils.datetime import utc_now


class InMemoryFlowStorage:
    """FlowStorageProtocol kept in dicts; mirrors SqlFlowStorage semantics."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.flows: dict[int, FlowRecord] = {}
        self.points: list[PointRecord] = []
        self.assertions: list[AssertionRecord] = []
        self.schema_applied = 0
        self.closed = False

    async def apply_schema(self) -> None:
        self.schema_applied += 1

    async def count_flows_by_name(self, name: str) -> int:
        return sum(1 for f in self.flows.values() if f.name == name)

    def _active(self, name: str, identifier: str | None) -> list[FlowRecord]:
        return [
            f
            for f in self.flows.values()
            if f.name == name
            and f.identifier == (identifier or None)
            and f.status is FlowStatus.ACTIVE
        ]

    def _set_status(self, flow: FlowRecord, status: FlowStatus) -> None:
        self.flows[flow.id] = FlowRecord(
            id=flow.id,
            name=flow.name,
            identifier=flow.identifier,
            status=status,
            service=flow.service,
            created_at=flow.created_at,
            updated_at=utc_now(),
        )

    async def interrupt_active_flows(self, name: str, identifier: str | None) -> None:
        for f in self._active(name, identifier):
            self._set_status(f, FlowStatus.INTERRUPTED)

    async def insert_flow(self, name: str, identifier: str | None, service: str) -> int:
        now = utc_now()
        flow_id = next(self._ids)
        self.flows[flow_id] = FlowRecord(
            id=flow_id,
            name=name,
            identifier=identifier or None,
            status=FlowStatus.ACTIVE,
            service=service,
            created_at=now,
            updated_at=now,
        )
        return flow_id

    async def start_flow(self, name: str, identifier: str | None, service: str) -> FlowRecord:
        await self.interrupt_active_flows(name, identifier)
        return self.flows[await self.insert_flow(name, identifier, service)]

    async def find_active_flow(self, name: str, identifier: str | None) -> FlowRecord:
        active = self._active(name, identifier)
        if not active:
            raise FlowNotFoundException(name, identifier)
        return max(active, key=lambda f: f.id)

    async def finish_flow(self, flow_id: int, flow_name: str | None = None) -> None:
        self._set_status(self.flows[flow_id], FlowStatus.FINISHED)

    async def insert_point(self, point: PointCreate, flow_name: str | None = None) -> int:
        point_id = next(self._ids)
        self.points.append(
            PointRecord(
                id=point_id,
                flow_id=point.flow_id,
                description=point.description,
                expected=point.expected,
                service_name=point.service_name,
                created_at=utc_now(),
                schema=point.schema,
                timeout_ms=point.timeout_ms,
            )
        )
        return point_id

    async def insert_assertion(
        self,
        flow_id: int,
        actual: JsonValue,
        service: str,
        flow_name: str | None = None,
    ) -> int:
        assertion_id = next(self._ids)
        now = utc_now()
        self.assertions.append(
            AssertionRecord(
                id=assertion_id,
                flow_id=flow_id,
                actual=actual,
                service_name=service,
                created_at=now,
                processed_at=now,
            )
        )
        return assertion_id

    async def fetch_points_and_assertions(
        self, flow_id: int, flow_name: str | None = None
    ) -> tuple[list[PointRecord], list[AssertionRecord]]:
        return (
            [p for p in self.points if p.flow_id == flow_id],
            [a for a in self.assertions if a.flow_id == flow_id],
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def memory_storage() -> InMemoryFlowStorage:
    return InMemoryFlowStorage()


@pytest.fixture
def make_memory_client(
    memory_storage: InMemoryFlowStorage,
) -> Callable[..., FlowClient]:
    """Build a FlowClient over the shared in-memory storage with settings overrides."""

    def _make(**overrides: Any) -> FlowClient:
        options: dict[str, Any] = {"service_name": "test-service", **overrides}
        return FlowClient(FlowSettings(**options), storage=memory_storage)

    return _make


@pytest.fixture
def settings(tmp_path) -> FlowSettings:
    """Settings pointing at a fresh SQLite file database."""
    return FlowSettings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'flows.db'}",
        service_name="test-service",
        timeout_seconds=10.0,
    )


@pytest.fixture
async def engine(settings: FlowSettings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    yield engine
    await engine.dispose()


@pytest.fixture
async def storage(engine: AsyncEngine, settings: FlowSettings) -> SqlFlowStorage:
    """SqlFlowStorage with the schema applied."""
    storage = SqlFlowStorage(engine, settings.timeout_seconds)
    await storage.apply_schema()
    return storage


@pytest.fixture
def make_client(
    engine: AsyncEngine, settings: FlowSettings
) -> Callable[..., FlowClient]:
    """Build FlowClients sharing the test engine, with settings overrides."""

    def _make(**overrides: Any) -> FlowClient:
        return FlowClient(settings.model_copy(update=overrides), engine=engine)

    return _make


@pytest.fixture
async def flow_client(make_client: Callable[..., FlowClient]) -> AsyncIterator[FlowClient]:
    """Connected client (schema applied) with default settings."""
    async with make_client() as client:
        yield client


@pytest.fixture
async def client(settings: FlowSettings) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the dashboard app (ASGI), lifespan included."""
    app = create_app(settings)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

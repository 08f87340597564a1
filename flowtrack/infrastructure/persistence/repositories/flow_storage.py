"""SQL flow storage: the only component that touches the flows database.

Implements FlowStorageProtocol on an AsyncEngine. Every operation opens its
own session, runs under the client deadline (asyncio.timeout) and wraps any
database failure in StorageFailureException with the operation and flow
name. Nothing is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from flowtrack.application.dtos.flow import (
    AssertionRecord,
    FlowRecord,
    PointCreate,
    PointRecord,
)
from flowtrack.domain.enums import FlowStatus
from flowtrack.domain.exceptions import (
    FlowNotFoundException,
    FlowTrackException,
    StorageFailureException,
)
from flowtrack.domain.values import JsonValue
from flowtrack.infrastructure.persistence.database import Base, create_session_factory
from flowtrack.infrastructure.persistence.models.flow import Assertion, Flow, Point
from flowtrack.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def flow_to_record(f: Flow) -> FlowRecord:
    """Map Flow ORM to FlowRecord."""
    return FlowRecord(
        id=f.id,
        name=f.name,
        identifier=f.identifier,
        status=FlowStatus(f.status),
        service=f.service,
        metadata=f.flow_metadata,
        created_at=ensure_utc(f.created_at),
        updated_at=ensure_utc(f.updated_at),
    )


def point_to_record(p: Point) -> PointRecord:
    """Map Point ORM to PointRecord."""
    return PointRecord(
        id=p.id,
        flow_id=p.flow_id,
        description=p.description or "",
        expected=p.expected,
        service_name=p.service_name,
        created_at=ensure_utc(p.created_at),
        schema=p.schema_definition,
        timeout_ms=p.timeout_ms,
    )


def assertion_to_record(a: Assertion) -> AssertionRecord:
    """Map Assertion ORM to AssertionRecord."""
    return AssertionRecord(
        id=a.id,
        flow_id=a.flow_id,
        actual=a.actual,
        service_name=a.service_name,
        created_at=ensure_utc(a.created_at),
        processed_at=ensure_utc(a.processed_at),
    )


def identifier_clause(identifier: str | None) -> ColumnElement[bool]:
    """Exact identifier match; empty/None identifier matches IS NULL."""
    if identifier:
        return Flow.identifier == identifier
    return Flow.identifier.is_(None)


class SqlFlowStorage:
    """Flow persistence on SQLAlchemy (PostgreSQL in production, SQLite in tests)."""

    def __init__(
        self,
        engine: AsyncEngine,
        timeout_seconds: float = 30.0,
        *,
        owns_engine: bool = False,
    ) -> None:
        """Initialize storage.

        Args:
            engine: Async engine (connection pool) to run queries on.
            timeout_seconds: Deadline applied to every operation.
            owns_engine: Dispose the engine on close().
        """
        self.engine = engine
        self.timeout_seconds = timeout_seconds
        self._owns_engine = owns_engine
        self._sessions = create_session_factory(engine)

    @asynccontextmanager
    async def _guard(self, operation: str, flow_name: str | None) -> AsyncIterator[None]:
        """Apply the deadline and wrap storage errors (domain errors pass through)."""
        try:
            async with asyncio.timeout(self.timeout_seconds):
                yield
        except FlowTrackException:
            raise
        except (SQLAlchemyError, TimeoutError, OSError) as e:
            logger.warning("Storage operation %s failed for flow %s: %s", operation, flow_name, e)
            raise StorageFailureException(operation, flow_name, e) from e

    async def apply_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        async with self._guard("apply_schema", None):
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.debug("Flow schema applied")

    async def count_flows_by_name(self, name: str) -> int:
        """Return total flows with this name, regardless of status."""
        async with self._guard("count_flows", name):
            async with self._sessions() as session:
                result = await session.execute(
                    select(func.count()).select_from(Flow).where(Flow.name == name)
                )
                return int(result.scalar_one())

    async def _interrupt(
        self, session: AsyncSession, name: str, identifier: str | None
    ) -> int:
        result = await session.execute(
            update(Flow)
            .where(
                Flow.name == name,
                Flow.status == FlowStatus.ACTIVE.value,
                identifier_clause(identifier),
            )
            .values(status=FlowStatus.INTERRUPTED.value, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def _insert(
        self, session: AsyncSession, name: str, identifier: str | None, service: str
    ) -> Flow:
        flow = Flow(
            name=name,
            identifier=identifier or None,
            status=FlowStatus.ACTIVE.value,
            service=service,
        )
        session.add(flow)
        await session.flush()
        await session.refresh(flow)
        return flow

    async def interrupt_active_flows(self, name: str, identifier: str | None) -> None:
        """Mark the ACTIVE flow for (name, identifier) INTERRUPTED; zero rows is fine."""
        async with self._guard("interrupt", name):
            async with self._sessions() as session, session.begin():
                count = await self._interrupt(session, name, identifier)
        if count:
            logger.debug("Interrupted %d active flow(s) for %s [%s]", count, name, identifier)

    async def insert_flow(self, name: str, identifier: str | None, service: str) -> int:
        """Insert a new ACTIVE flow (empty identifier stored as NULL); return its id."""
        async with self._guard("insert_flow", name):
            async with self._sessions() as session, session.begin():
                flow = await self._insert(session, name, identifier, service)
                return flow.id

    async def _start_once(
        self, name: str, identifier: str | None, service: str
    ) -> FlowRecord:
        async with self._sessions() as session, session.begin():
            await self._interrupt(session, name, identifier)
            flow = await self._insert(session, name, identifier, service)
            return flow_to_record(flow)

    async def start_flow(
        self, name: str, identifier: str | None, service: str
    ) -> FlowRecord:
        """Interrupt the current ACTIVE flow and insert a new one in one transaction.

        The partial unique index rejects a second ACTIVE row; when a concurrent
        start wins the race, the transaction is re-run once against the new state.
        """
        async with self._guard("start", name):
            try:
                return await self._start_once(name, identifier, service)
            except IntegrityError:
                logger.info(
                    "Concurrent start detected for flow %s [%s]; re-running", name, identifier
                )
            return await self._start_once(name, identifier, service)

    async def find_active_flow(self, name: str, identifier: str | None) -> FlowRecord:
        """Return the most recently created ACTIVE flow for (name, identifier).

        Raises:
            FlowNotFoundException: No ACTIVE flow matches.
        """
        async with self._guard("get_flow", name):
            async with self._sessions() as session:
                result = await session.execute(
                    select(Flow)
                    .where(
                        Flow.name == name,
                        Flow.status == FlowStatus.ACTIVE.value,
                        identifier_clause(identifier),
                    )
                    .order_by(Flow.id.desc())
                    .limit(1)
                )
                row = result.scalar_one_or_none()
            if row is None:
                raise FlowNotFoundException(name, identifier)
            return flow_to_record(row)

    async def finish_flow(self, flow_id: int, flow_name: str | None = None) -> None:
        """Mark the flow FINISHED and bump updated_at."""
        async with self._guard("finish", flow_name):
            async with self._sessions() as session, session.begin():
                await session.execute(
                    update(Flow)
                    .where(Flow.id == flow_id)
                    .values(status=FlowStatus.FINISHED.value, updated_at=func.now())
                    .execution_options(synchronize_session=False)
                )

    async def insert_point(self, point: PointCreate, flow_name: str | None = None) -> int:
        """Append a point; return its id."""
        async with self._guard("create_point", flow_name):
            async with self._sessions() as session, session.begin():
                row = Point(
                    flow_id=point.flow_id,
                    description=point.description,
                    expected=point.expected,
                    service_name=point.service_name,
                    schema_definition=point.schema,
                    timeout_ms=point.timeout_ms,
                )
                session.add(row)
                await session.flush()
                return row.id

    async def insert_assertion(
        self,
        flow_id: int,
        actual: JsonValue,
        service: str,
        flow_name: str | None = None,
    ) -> int:
        """Append an assertion stamped with processed_at; return its id."""
        async with self._guard("add_assertion", flow_name):
            async with self._sessions() as session, session.begin():
                row = Assertion(
                    flow_id=flow_id,
                    actual=actual,
                    service_name=service,
                    processed_at=utc_now(),
                )
                session.add(row)
                await session.flush()
                return row.id

    async def _fetch_points(self, flow_id: int) -> list[PointRecord]:
        async with self._sessions() as session:
            result = await session.execute(
                select(Point)
                .where(Point.flow_id == flow_id)
                .order_by(Point.created_at.asc(), Point.id.asc())
            )
            return [point_to_record(p) for p in result.scalars().all()]

    async def _fetch_assertions(self, flow_id: int) -> list[AssertionRecord]:
        async with self._sessions() as session:
            result = await session.execute(
                select(Assertion)
                .where(Assertion.flow_id == flow_id)
                .order_by(Assertion.created_at.asc(), Assertion.id.asc())
            )
            return [assertion_to_record(a) for a in result.scalars().all()]

    async def fetch_points_and_assertions(
        self, flow_id: int, flow_name: str | None = None
    ) -> tuple[list[PointRecord], list[AssertionRecord]]:
        """Fetch points and assertions concurrently, each ordered by creation time.

        The first leg to fail decides the error; the other leg is cancelled and
        its result discarded.
        """
        async with self._guard("fetch", flow_name):
            points_task = asyncio.create_task(self._fetch_points(flow_id))
            assertions_task = asyncio.create_task(self._fetch_assertions(flow_id))
            legs = (points_task, assertions_task)
            try:
                done, _ = await asyncio.wait(legs, return_when=asyncio.FIRST_EXCEPTION)
                errors = [t.exception() for t in legs if t in done]
                for error in errors:
                    if error is not None:
                        raise error
            finally:
                pending = [t for t in legs if not t.done()]
                for task in pending:
                    task.cancel()
                if pending:
                    await asyncio.gather(*pending, return_exceptions=True)
            return points_task.result(), assertions_task.result()

    async def close(self) -> None:
        """Dispose the engine if this storage created it."""
        if self._owns_engine:
            await self.engine.dispose()
            logger.debug("Flow storage engine disposed")

"""Integration tests for DashboardRepository queries on SQLite."""

from collections.abc import AsyncIterator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from flowtrack.application.dtos.flow import PointCreate
from flowtrack.domain.enums import FlowStatus
from flowtrack.infrastructure.persistence.database import create_session_factory
from flowtrack.infrastructure.persistence.repositories import (
    DashboardRepository,
    SqlFlowStorage,
)


@pytest.fixture
async def db(engine, storage: SqlFlowStorage) -> AsyncIterator[AsyncSession]:
    async with create_session_factory(engine)() as session:
        yield session


async def test_base_helpers(db: AsyncSession, storage: SqlFlowStorage) -> None:
    for name in ("a", "b", "c"):
        await storage.start_flow(name, None, "svc")
    repo = DashboardRepository(db)
    assert await repo.count() == 3
    b = await storage.find_active_flow("b", None)
    first = await repo.get_by_id(b.id)
    assert first is not None and first.name == "b"
    assert (await repo.get_stats()).total_flows == 3
    assert await repo.get_by_id(9999) is None


async def test_search_escapes_like_wildcards(db: AsyncSession, storage: SqlFlowStorage) -> None:
    await storage.start_flow("order_created", None, "svc")
    await storage.start_flow("orderXcreated", None, "svc")
    repo = DashboardRepository(db)
    page = await repo.list_flows(search="order_")
    assert [s.flow.name for s in page.items] == ["order_created"]
    assert page.total == 1


async def test_list_points_and_assertions_paginate(
    db: AsyncSession, storage: SqlFlowStorage
) -> None:
    flow = await storage.start_flow("orders", None, "svc")
    for i in range(3):
        await storage.insert_point(
            PointCreate(flow_id=flow.id, description=f"p{i}", expected=i, service_name="svc")
        )
        await storage.insert_assertion(flow.id, i, "svc")
    repo = DashboardRepository(db)
    assert [p.description for p in await repo.list_points(flow.id, skip=1, limit=1)] == ["p1"]
    assert [a.actual for a in await repo.list_assertions(flow.id, skip=2)] == [2]
    assert await repo.count_points_and_assertions(flow.id) == (3, 3)


async def test_stats_by_status(db: AsyncSession, storage: SqlFlowStorage) -> None:
    done = await storage.start_flow("orders", "1", "svc")
    await storage.finish_flow(done.id)
    await storage.start_flow("orders", "2", "svc")
    await storage.start_flow("orders", "2", "svc")
    stats = await DashboardRepository(db).get_stats()
    assert stats.total_flows == 3
    assert stats.finished_flows == 1
    assert stats.interrupted_flows == 1
    assert stats.active_flows == 1
    summary = (await DashboardRepository(db).list_flows(status=FlowStatus.ACTIVE)).items
    assert [s.flow.identifier for s in summary] == ["2"]

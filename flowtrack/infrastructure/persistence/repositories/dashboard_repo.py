"""Dashboard repository: read-only queries over flows, points and assertions."""

from __future__ import annotations

from sqlalchemy import Select, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from flowtrack.application.dtos.flow import (
    AssertionRecord,
    FlowPage,
    FlowRecord,
    FlowStats,
    FlowSummary,
    PointRecord,
)
from flowtrack.core.constants import DEFAULT_FLOWS_PAGE_SIZE
from flowtrack.domain.enums import FlowStatus
from flowtrack.infrastructure.persistence.models.flow import Assertion, Flow, Point
from flowtrack.infrastructure.persistence.repositories.base import BaseRepository
from flowtrack.infrastructure.persistence.repositories.flow_storage import (
    assertion_to_record,
    flow_to_record,
    point_to_record,
)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DashboardRepository(BaseRepository[Flow]):
    """Flow browsing for the dashboard. Never writes."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Flow)

    async def get_stats(self) -> FlowStats:
        """Return flow totals by status plus point/assertion totals."""
        result = await self.db.execute(
            select(Flow.status, func.count()).group_by(Flow.status)
        )
        by_status = {status: int(n) for status, n in result.all()}
        points = await self.db.execute(select(func.count()).select_from(Point))
        assertions = await self.db.execute(select(func.count()).select_from(Assertion))
        return FlowStats(
            total_flows=await self.count(),
            active_flows=by_status.get(FlowStatus.ACTIVE.value, 0),
            finished_flows=by_status.get(FlowStatus.FINISHED.value, 0),
            interrupted_flows=by_status.get(FlowStatus.INTERRUPTED.value, 0),
            total_points=int(points.scalar_one()),
            total_assertions=int(assertions.scalar_one()),
        )

    def _filtered(
        self, q: Select, status: FlowStatus | None, search: str | None
    ) -> Select:
        if status is not None:
            q = q.where(Flow.status == status.value)
        if search:
            pattern = f"%{_escape_like(search.strip().lower())}%"
            q = q.where(
                or_(
                    func.lower(Flow.name).like(pattern, escape="\\"),
                    func.lower(func.coalesce(Flow.identifier, "")).like(
                        pattern, escape="\\"
                    ),
                    func.lower(func.coalesce(Flow.service, "")).like(
                        pattern, escape="\\"
                    ),
                )
            )
        return q

    async def list_flows(
        self,
        skip: int = 0,
        limit: int = DEFAULT_FLOWS_PAGE_SIZE,
        status: FlowStatus | None = None,
        search: str | None = None,
    ) -> FlowPage:
        """Return flows newest first with point/assertion counts.

        search matches name, identifier or service (case-insensitive substring).
        """
        total_q = self._filtered(select(func.count()).select_from(Flow), status, search)
        total = int((await self.db.execute(total_q)).scalar_one())

        point_counts = (
            select(Point.flow_id, func.count().label("n"))
            .group_by(Point.flow_id)
            .subquery()
        )
        assertion_counts = (
            select(Assertion.flow_id, func.count().label("n"))
            .group_by(Assertion.flow_id)
            .subquery()
        )
        q = (
            select(
                Flow,
                func.coalesce(point_counts.c.n, 0),
                func.coalesce(assertion_counts.c.n, 0),
            )
            .outerjoin(point_counts, point_counts.c.flow_id == Flow.id)
            .outerjoin(assertion_counts, assertion_counts.c.flow_id == Flow.id)
        )
        q = self._filtered(q, status, search)
        q = q.order_by(desc(Flow.created_at), desc(Flow.id)).offset(skip).limit(limit)
        result = await self.db.execute(q)
        items = [
            FlowSummary(
                flow=flow_to_record(f),
                point_count=int(pc),
                assertion_count=int(ac),
            )
            for f, pc, ac in result.all()
        ]
        return FlowPage(items=items, total=total)

    async def get_flow(self, flow_id: int) -> FlowRecord | None:
        """Return flow by id."""
        row = await self.get_by_id(flow_id)
        return flow_to_record(row) if row else None

    async def count_points_and_assertions(self, flow_id: int) -> tuple[int, int]:
        """Return (point count, assertion count) for a flow."""
        points = await self.db.execute(
            select(func.count()).select_from(Point).where(Point.flow_id == flow_id)
        )
        assertions = await self.db.execute(
            select(func.count())
            .select_from(Assertion)
            .where(Assertion.flow_id == flow_id)
        )
        return int(points.scalar_one()), int(assertions.scalar_one())

    async def list_points(
        self, flow_id: int, skip: int = 0, limit: int | None = None
    ) -> list[PointRecord]:
        """Return points for a flow in insertion order."""
        q = (
            select(Point)
            .where(Point.flow_id == flow_id)
            .order_by(Point.created_at.asc(), Point.id.asc())
            .offset(skip)
        )
        if limit is not None:
            q = q.limit(limit)
        result = await self.db.execute(q)
        return [point_to_record(p) for p in result.scalars().all()]

    async def list_assertions(
        self, flow_id: int, skip: int = 0, limit: int | None = None
    ) -> list[AssertionRecord]:
        """Return assertions for a flow in insertion order."""
        q = (
            select(Assertion)
            .where(Assertion.flow_id == flow_id)
            .order_by(Assertion.created_at.asc(), Assertion.id.asc())
            .offset(skip)
        )
        if limit is not None:
            q = q.limit(limit)
        result = await self.db.execute(q)
        return [assertion_to_record(a) for a in result.scalars().all()]

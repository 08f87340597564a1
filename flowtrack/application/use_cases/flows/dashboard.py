"""Dashboard use cases: flow detail timeline and per-index comparison."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flowtrack.application.dtos.flow import FlowDetail, FlowRecord, TimelineEntry
from flowtrack.application.dtos.reconciliation import FlowComparison
from flowtrack.application.services.reconciliation import pair_by_index
from flowtrack.domain.exceptions import ResourceNotFoundException

if TYPE_CHECKING:
    from flowtrack.application.interfaces.repositories import IDashboardRepository


async def _require_flow(repo: IDashboardRepository, flow_id: int) -> FlowRecord:
    flow = await repo.get_flow(flow_id)
    if flow is None:
        raise ResourceNotFoundException("flow", flow_id)
    return flow


class GetFlowDetailUseCase:
    """Flow info plus a page of points and assertions merged by created_at."""

    def __init__(self, dashboard_repo: IDashboardRepository) -> None:
        self.dashboard_repo = dashboard_repo

    async def execute(self, flow_id: int, skip: int = 0, limit: int = 50) -> FlowDetail:
        """Return the detail view; pagination applies to points and assertions alike.

        Raises:
            ResourceNotFoundException: No flow with this id.
        """
        flow = await _require_flow(self.dashboard_repo, flow_id)
        total_points, total_assertions = (
            await self.dashboard_repo.count_points_and_assertions(flow_id)
        )
        points = await self.dashboard_repo.list_points(flow_id, skip=skip, limit=limit)
        assertions = await self.dashboard_repo.list_assertions(
            flow_id, skip=skip, limit=limit
        )
        timeline = [TimelineEntry("POINT", p.created_at, p) for p in points]
        timeline += [TimelineEntry("ASSERTION", a.created_at, a) for a in assertions]
        # stable: a point and an assertion with equal timestamps keep point first
        timeline.sort(key=lambda e: e.timestamp)
        return FlowDetail(
            flow=flow,
            timeline=timeline,
            total_points=total_points,
            total_assertions=total_assertions,
        )


class CompareFlowUseCase:
    """Pair a flow's points and assertions the way finish() does, without finishing it."""

    def __init__(self, dashboard_repo: IDashboardRepository) -> None:
        self.dashboard_repo = dashboard_repo

    async def execute(self, flow_id: int) -> FlowComparison:
        """Return one row per index with its diffs.

        Raises:
            ResourceNotFoundException: No flow with this id.
        """
        await _require_flow(self.dashboard_repo, flow_id)
        points = await self.dashboard_repo.list_points(flow_id)
        assertions = await self.dashboard_repo.list_assertions(flow_id)
        return FlowComparison(
            flow_id=flow_id,
            rows=pair_by_index(points, assertions),
            total_points=len(points),
            total_assertions=len(assertions),
        )


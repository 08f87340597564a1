"""Flow API: thin read-only routes delegating to use cases and the dashboard repository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from flowtrack.api.v1.dependencies import (
    get_compare_flow_use_case,
    get_dashboard_repo,
    get_flow_detail_use_case,
)
from flowtrack.application.dtos.flow import PointRecord
from flowtrack.application.interfaces.repositories import IDashboardRepository
from flowtrack.application.use_cases.flows import (
    CompareFlowUseCase,
    GetFlowDetailUseCase,
)
from flowtrack.core.constants import (
    DEFAULT_FLOWS_PAGE_SIZE,
    DEFAULT_TIMELINE_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from flowtrack.domain.enums import FlowStatus
from flowtrack.schemas.flow import (
    AssertionResponse,
    CompareRowResponse,
    FlowCompareResponse,
    FlowDetailResponse,
    FlowListItem,
    FlowListResponse,
    FlowResponse,
    PageMeta,
    PointResponse,
    TimelineEntryResponse,
    TimelineMeta,
)

router = APIRouter()


def _pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit


@router.get("", response_model=FlowListResponse)
async def list_flows(
    repo: Annotated[IDashboardRepository, Depends(get_dashboard_repo)],
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_FLOWS_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status: FlowStatus | None = None,
    search: str | None = Query(None, max_length=255),
):
    """List flows newest first. search matches name, identifier or service."""
    result = await repo.list_flows(
        skip=(page - 1) * limit, limit=limit, status=status, search=search
    )
    items = [
        FlowListItem(
            **FlowResponse.model_validate(s.flow).model_dump(),
            point_count=s.point_count,
            assertion_count=s.assertion_count,
        )
        for s in result.items
    ]
    return FlowListResponse(
        data=items,
        meta=PageMeta(
            page=page, limit=limit, total=result.total, pages=_pages(result.total, limit)
        ),
    )


@router.get("/{flow_id}", response_model=FlowDetailResponse)
async def get_flow(
    flow_id: int,
    detail_uc: Annotated[GetFlowDetailUseCase, Depends(get_flow_detail_use_case)],
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_TIMELINE_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    """Flow info plus one page of its points and assertions, sorted by created_at."""
    detail = await detail_uc.execute(flow_id, skip=(page - 1) * limit, limit=limit)
    entries = [
        TimelineEntryResponse(
            type=e.type,
            timestamp=e.timestamp,
            data=(
                PointResponse.model_validate(e.data)
                if isinstance(e.data, PointRecord)
                else AssertionResponse.model_validate(e.data)
            ),
        )
        for e in detail.timeline
    ]
    return FlowDetailResponse(
        flow=FlowResponse.model_validate(detail.flow),
        data=entries,
        meta=TimelineMeta(
            page=page,
            limit=limit,
            total_points=detail.total_points,
            total_assertions=detail.total_assertions,
            pages=_pages(max(detail.total_points, detail.total_assertions), limit),
        ),
    )


@router.get("/{flow_id}/compare", response_model=FlowCompareResponse)
async def compare_flow(
    flow_id: int,
    compare_uc: Annotated[CompareFlowUseCase, Depends(get_compare_flow_use_case)],
):
    """Pair points with assertions by index and diff each pair (does not finish the flow)."""
    comparison = await compare_uc.execute(flow_id)
    return FlowCompareResponse(
        results=[CompareRowResponse.model_validate(r) for r in comparison.rows],
        total=len(comparison.rows),
        matches=comparison.matches,
        mismatches=comparison.mismatches,
        success=comparison.success,
        total_points=comparison.total_points,
        total_assertions=comparison.total_assertions,
    )

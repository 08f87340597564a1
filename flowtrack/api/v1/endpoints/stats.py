"""Stats API: totals shown in the dashboard header."""

from typing import Annotated

from fastapi import APIRouter, Depends

from flowtrack.api.v1.dependencies import get_dashboard_repo
from flowtrack.application.interfaces.repositories import IDashboardRepository
from flowtrack.schemas.flow import FlowStatsResponse

router = APIRouter()


@router.get("", response_model=FlowStatsResponse)
async def get_stats(
    repo: Annotated[IDashboardRepository, Depends(get_dashboard_repo)],
):
    """Flow counts by status plus point and assertion totals."""
    stats = await repo.get_stats()
    return FlowStatsResponse.model_validate(stats)

"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the dashboard repository and
use cases. The engine and session factory are created in the lifespan and
kept on app.state; routes never build infrastructure themselves.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from flowtrack.application.interfaces.repositories import IDashboardRepository
from flowtrack.application.use_cases.flows import (
    CompareFlowUseCase,
    GetFlowDetailUseCase,
)
from flowtrack.infrastructure.persistence.repositories import DashboardRepository


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a read-only session; closed on exit."""
    async with request.app.state.session_factory() as session:
        yield session


def get_dashboard_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IDashboardRepository:
    return DashboardRepository(db)


def get_flow_detail_use_case(
    repo: Annotated[IDashboardRepository, Depends(get_dashboard_repo)],
) -> GetFlowDetailUseCase:
    return GetFlowDetailUseCase(repo)


def get_compare_flow_use_case(
    repo: Annotated[IDashboardRepository, Depends(get_dashboard_repo)],
) -> CompareFlowUseCase:
    return CompareFlowUseCase(repo)

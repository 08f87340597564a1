"""Pydantic response schemas for the dashboard API."""

from flowtrack.schemas.flow import (
    FlowCompareResponse,
    FlowDetailResponse,
    FlowListResponse,
    FlowStatsResponse,
)
from flowtrack.schemas.health import HealthResponse

__all__ = [
    "FlowCompareResponse",
    "FlowDetailResponse",
    "FlowListResponse",
    "FlowStatsResponse",
    "HealthResponse",
]

"""Dashboard flow API schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from flowtrack.domain.enums import CompareStatus, FlowStatus


class FlowResponse(BaseModel):
    """Flow row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    identifier: str | None
    status: FlowStatus
    service: str | None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None
    updated_at: datetime | None


class FlowListItem(FlowResponse):
    """Flow row with point/assertion counts."""

    point_count: int = 0
    assertion_count: int = 0


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class FlowListResponse(BaseModel):
    """Response for GET /flows."""

    data: list[FlowListItem]
    meta: PageMeta


class FlowStatsResponse(BaseModel):
    """Response for GET /stats."""

    model_config = ConfigDict(from_attributes=True)

    total_flows: int
    active_flows: int
    finished_flows: int
    interrupted_flows: int
    total_points: int
    total_assertions: int


class PointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="forbid", populate_by_name=True)

    id: int
    flow_id: int
    description: str
    expected: Any = None
    service_name: str | None
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    timeout_ms: int | None = None
    created_at: datetime


class AssertionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="forbid")

    id: int
    flow_id: int
    actual: Any = None
    service_name: str | None
    processed_at: datetime | None = None
    created_at: datetime


class TimelineEntryResponse(BaseModel):
    """One point or assertion on the flow timeline."""

    type: Literal["POINT", "ASSERTION"]
    timestamp: datetime
    data: PointResponse | AssertionResponse


class TimelineMeta(BaseModel):
    page: int
    limit: int
    total_points: int
    total_assertions: int
    pages: int


class FlowDetailResponse(BaseModel):
    """Response for GET /flows/{id}."""

    flow: FlowResponse
    data: list[TimelineEntryResponse]
    meta: TimelineMeta


class DiffEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    path: str
    expected: Any = None
    actual: Any = None
    message: str


class CompareRowResponse(BaseModel):
    """Per-index pairing result."""

    model_config = ConfigDict(from_attributes=True)

    index: int
    status: CompareStatus
    match: bool
    description: str
    point_id: int | None = None
    assertion_id: int | None = None
    expected: Any = None
    actual: Any = None
    diffs: list[DiffEntryResponse] = Field(default_factory=list)


class FlowCompareResponse(BaseModel):
    """Response for GET /flows/{id}/compare."""

    results: list[CompareRowResponse]
    total: int
    matches: int
    mismatches: int
    success: bool
    total_points: int
    total_assertions: int

"""DTOs for flows, points and assertions (storage read-models)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from flowtrack.domain.enums import FlowStatus
from flowtrack.domain.values import JsonValue


@dataclass(frozen=True)
class FlowRecord:
    """Flow read-model. id is None for unpersisted (skipped) instances."""

    name: str
    status: FlowStatus
    id: int | None = None
    identifier: str | None = None
    service: str | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class PointCreate:
    """Point to persist. expected is already converted to JSON."""

    flow_id: int
    description: str
    expected: JsonValue
    service_name: str
    schema: dict[str, Any] | None = None
    timeout_ms: int | None = None


@dataclass(frozen=True)
class PointRecord:
    """Stored expectation."""

    id: int
    flow_id: int
    description: str
    expected: JsonValue
    service_name: str | None
    created_at: datetime
    schema: dict[str, Any] | None = None
    timeout_ms: int | None = None


@dataclass(frozen=True)
class AssertionRecord:
    """Stored observation."""

    id: int
    flow_id: int
    actual: JsonValue
    service_name: str | None
    created_at: datetime
    processed_at: datetime | None = None


@dataclass(frozen=True)
class FlowSummary:
    """Flow with point/assertion counts (dashboard list row)."""

    flow: FlowRecord
    point_count: int = 0
    assertion_count: int = 0


@dataclass(frozen=True)
class FlowStats:
    """Totals across all flows (dashboard header)."""

    total_flows: int
    active_flows: int
    finished_flows: int
    interrupted_flows: int
    total_points: int
    total_assertions: int


@dataclass(frozen=True)
class FlowPage:
    """One page of flow summaries plus the unpaginated total."""

    items: list[FlowSummary] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class TimelineEntry:
    """Point or assertion placed on a flow's timeline."""

    type: str  # "POINT" | "ASSERTION"
    timestamp: datetime
    data: PointRecord | AssertionRecord


@dataclass(frozen=True)
class FlowDetail:
    """Flow info with one page of its timeline."""

    flow: FlowRecord
    timeline: list[TimelineEntry] = field(default_factory=list)
    total_points: int = 0
    total_assertions: int = 0

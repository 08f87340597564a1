"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports. Tests
substitute in-memory fakes for these.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from flowtrack.domain.enums import FlowStatus

if TYPE_CHECKING:
    from flowtrack.application.dtos.flow import (
        AssertionRecord,
        FlowPage,
        FlowRecord,
        FlowStats,
        PointCreate,
        PointRecord,
    )
    from flowtrack.domain.values import JsonValue


class FlowStorageProtocol(Protocol):
    """Protocol for flow persistence used by the flow client (DIP)."""

    async def apply_schema(self) -> None:
        """Create tables and indexes if they do not exist."""

    async def count_flows_by_name(self, name: str) -> int:
        """Return how many flows were ever created with this name (any status)."""

    async def interrupt_active_flows(self, name: str, identifier: str | None) -> None:
        """Mark the ACTIVE flow for (name, identifier) as INTERRUPTED, if any."""

    async def insert_flow(
        self, name: str, identifier: str | None, service: str
    ) -> int:
        """Insert a new ACTIVE flow and return its id."""

    async def start_flow(
        self, name: str, identifier: str | None, service: str
    ) -> FlowRecord:
        """Interrupt the ACTIVE flow for (name, identifier) and insert a new one atomically."""

    async def find_active_flow(self, name: str, identifier: str | None) -> FlowRecord:
        """Return the newest ACTIVE flow; raise FlowNotFoundException when absent."""

    async def finish_flow(self, flow_id: int, flow_name: str | None = None) -> None:
        """Mark the flow FINISHED."""

    async def insert_point(self, point: PointCreate, flow_name: str | None = None) -> int:
        """Append a point; return its id."""

    async def insert_assertion(
        self,
        flow_id: int,
        actual: JsonValue,
        service: str,
        flow_name: str | None = None,
    ) -> int:
        """Append an assertion stamped with processed_at; return its id."""

    async def fetch_points_and_assertions(
        self, flow_id: int, flow_name: str | None = None
    ) -> tuple[list[PointRecord], list[AssertionRecord]]:
        """Fetch both lists concurrently, each ordered by creation time."""

    async def close(self) -> None:
        """Release owned resources (connection pool)."""


class IDashboardRepository(Protocol):
    """Protocol for the read-only dashboard queries."""

    async def get_stats(self) -> FlowStats:
        """Return flow totals by status plus point/assertion totals."""

    async def list_flows(
        self,
        skip: int = 0,
        limit: int = 20,
        status: FlowStatus | None = None,
        search: str | None = None,
    ) -> FlowPage:
        """Return flows newest first with point/assertion counts."""

    async def get_flow(self, flow_id: int) -> FlowRecord | None:
        """Return flow by id."""

    async def count_points_and_assertions(self, flow_id: int) -> tuple[int, int]:
        """Return (point count, assertion count) for a flow."""

    async def list_points(
        self, flow_id: int, skip: int = 0, limit: int | None = None
    ) -> list[PointRecord]:
        """Return points for a flow in insertion order."""

    async def list_assertions(
        self, flow_id: int, skip: int = 0, limit: int | None = None
    ) -> list[AssertionRecord]:
        """Return assertions for a flow in insertion order."""

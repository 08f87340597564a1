"""Flow instance: handle on one flow execution returned by FlowClient.

Records points and assertions against the flow and reconciles them on
finish. Instances for SKIPPED / SKIPPED_LIMIT flows (and every instance of a
production-mode client) are inert: writes succeed without touching storage
and finish reports success.
"""

from __future__ import annotations

import time
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from flowtrack.application.dtos.flow import FlowRecord, PointCreate
from flowtrack.application.dtos.reconciliation import FinishResult
from flowtrack.application.services.reconciliation import reconcile
from flowtrack.domain.enums import FlowStatus
from flowtrack.domain.exceptions import (
    FlowSkippedException,
    LimitReachedException,
    SerializationException,
)
from flowtrack.domain.values import to_json_value
from flowtrack.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from flowtrack.application.use_cases.flows.client import FlowClient


class FlowInstance:
    """One flow execution as seen by a single client."""

    def __init__(self, client: FlowClient, flow: FlowRecord) -> None:
        self._client = client
        self._flow = flow
        self._started_at = time.monotonic()

    def __repr__(self) -> str:
        return (
            f"FlowInstance(name={self._flow.name!r}, "
            f"identifier={self._flow.identifier!r}, "
            f"id={self._flow.id!r}, status={self._flow.status.value})"
        )

    @property
    def inert(self) -> bool:
        """True when calls on this instance never reach storage."""
        return self._client.settings.production or self._flow.status.is_skipped

    def get_flow_info(self) -> FlowRecord:
        """Return the flow record this instance was created with.

        The status is the one observed at start/get_flow time; a later start
        for the same key does not update it.
        """
        return self._flow

    def raise_if_skipped(self) -> None:
        """Raise when this instance is a skipped (unpersisted) flow.

        Raises:
            LimitReachedException: Status is SKIPPED_LIMIT.
            FlowSkippedException: Status is SKIPPED.
        """
        if self._flow.status is FlowStatus.SKIPPED_LIMIT:
            raise LimitReachedException(
                self._flow.name, self._client.settings.max_executions
            )
        if self._flow.status is FlowStatus.SKIPPED:
            raise FlowSkippedException(self._flow.name)

    async def create_point(
        self,
        description: str,
        expected: Any,
        *,
        schema: dict[str, Any] | None = None,
        timeout: timedelta | None = None,
    ) -> None:
        """Record an expectation on this flow.

        Args:
            description: Human-readable label shown in discrepancies.
            expected: Any JSON-serializable value (models, dataclasses, ...).
            schema: Optional JSON Schema stored with the point.
            timeout: Optional time budget stored with the point.

        Raises:
            SerializationException: expected or schema cannot be converted to JSON.
            StorageFailureException: The insert failed.
        """
        if self.inert:
            return
        expected_json = to_json_value(expected, "expected")
        schema_json = to_json_value(schema, "schema") if schema is not None else None
        if schema_json is not None and not isinstance(schema_json, dict):
            raise SerializationException("schema", "a JSON Schema must be an object")
        point = PointCreate(
            flow_id=self._flow.id,
            description=description,
            expected=expected_json,
            service_name=self._client.settings.service_name,
            schema=schema_json,
            timeout_ms=int(timeout.total_seconds() * 1000) if timeout is not None else None,
        )
        point_id = await self._client.storage.insert_point(point, flow_name=self._flow.name)
        self._client.logger.debug(
            "Point %s created: '%s' on flow '%s'", point_id, description, self._flow.name
        )

    async def add_assertion(self, actual: Any) -> None:
        """Record an observation on this flow.

        Raises:
            SerializationException: actual cannot be converted to JSON.
            StorageFailureException: The insert failed.
        """
        if self.inert:
            return
        actual_json = to_json_value(actual, "actual")
        assertion_id = await self._client.storage.insert_assertion(
            self._flow.id,
            actual_json,
            self._client.settings.service_name,
            flow_name=self._flow.name,
        )
        self._client.logger.debug(
            "Assertion %s added to flow '%s'", assertion_id, self._flow.name
        )

    @traced("flowtrack.flow.finish")
    async def finish(self) -> FinishResult:
        """Mark the flow FINISHED and reconcile its points with its assertions.

        Content mismatches are reported in the result, never raised.

        Raises:
            StorageFailureException: Marking finished or fetching failed.
        """
        if self.inert:
            return FinishResult(success=True)
        client = self._client
        await client.storage.finish_flow(self._flow.id, flow_name=self._flow.name)
        client.cache.delete(self._flow.name, self._flow.identifier)
        points, assertions = await client.storage.fetch_points_and_assertions(
            self._flow.id, flow_name=self._flow.name
        )
        result = reconcile(points, assertions, self._started_at)
        add_span_attributes(
            **{
                "flow.name": self._flow.name,
                "flow.points": len(points),
                "flow.assertions": len(assertions),
                "flow.errors": result.error_count,
            }
        )
        if result.success:
            client.logger.info(
                "Flow '%s' finished: SUCCESS (%s)", self._flow.name, result.execution_time
            )
        else:
            client.logger.error(
                "Flow '%s' finished: FAILED with %d discrepancies (%s)",
                self._flow.name,
                result.error_count,
                result.execution_time,
            )
        return result

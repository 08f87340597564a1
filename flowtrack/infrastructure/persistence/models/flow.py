"""Flow, Point and Assertion ORM models.

Flow = one execution of a named process. Points (expectations) and
assertions (observations) hang off a flow and are deleted with it.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from flowtrack.core.constants import ASSERTIONS_TABLE, FLOWS_TABLE, POINTS_TABLE
from flowtrack.domain.enums import FlowStatus
from flowtrack.infrastructure.persistence.database import Base
from flowtrack.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    IdMixin,
    TimestampMixin,
)

JsonType = JSON().with_variant(JSONB(), "postgresql")


class Flow(IdMixin, TimestampMixin, Base):
    """Flow: one execution of a named process. Table: flows."""

    __tablename__ = FLOWS_TABLE

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    identifier: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=FlowStatus.ACTIVE.value
    )
    service: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # "metadata" is reserved on declarative classes
    flow_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JsonType, nullable=True
    )

    __table_args__ = (
        Index("idx_flows_name_status", "name", "status"),
        Index("idx_flows_identifier", "identifier"),
    )


# At most one ACTIVE flow per (name, identifier); NULL identifier counts as ''.
Index(
    "uq_flows_active_name_identifier",
    Flow.name,
    func.coalesce(Flow.identifier, ""),
    unique=True,
    postgresql_where=Flow.status == FlowStatus.ACTIVE.value,
    sqlite_where=Flow.status == FlowStatus.ACTIVE.value,
)


class Point(IdMixin, CreatedAtMixin, Base):
    """Point: expectation recorded by the producing side. Table: points."""

    __tablename__ = POINTS_TABLE

    flow_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey(f"{FLOWS_TABLE}.id", ondelete="CASCADE"),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    expected: Mapped[Any] = mapped_column(JsonType, nullable=True)
    service_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    schema_definition: Mapped[dict[str, Any] | None] = mapped_column(
        "schema", JsonType, nullable=True
    )
    timeout_ms: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    __table_args__ = (Index("idx_points_flow_id", "flow_id"),)


class Assertion(IdMixin, CreatedAtMixin, Base):
    """Assertion: observation recorded by the consuming side. Table: assertions."""

    __tablename__ = ASSERTIONS_TABLE

    flow_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey(f"{FLOWS_TABLE}.id", ondelete="CASCADE"),
        nullable=False,
    )
    actual: Mapped[Any] = mapped_column(JsonType, nullable=True)
    service_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (Index("idx_assertions_flow_id", "flow_id"),)

"""DTOs for structural diffs and reconciliation results."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from flowtrack.domain.enums import CompareStatus
from flowtrack.domain.values import JsonValue


@dataclass(frozen=True)
class DiffEntry:
    """One path-qualified difference between expected and actual."""

    path: str
    expected: JsonValue
    actual: JsonValue
    message: str


@dataclass(frozen=True)
class Discrepancy:
    """Mismatch, missing assertion or orphan assertion found by reconciliation."""

    description: str
    diff: str
    timestamp: datetime
    point_id: int | None = None
    assertion_id: int | None = None
    expected: JsonValue = None
    actual: JsonValue = None


@dataclass(frozen=True)
class FinishResult:
    """Outcome of Finish: success when no discrepancies were produced."""

    success: bool
    discrepancies: list[Discrepancy] = field(default_factory=list)
    error_count: int = 0
    execution_time: timedelta = timedelta(0)


@dataclass(frozen=True)
class CompareRow:
    """Per-index pairing result (dashboard compare view)."""

    index: int
    status: CompareStatus
    description: str
    point_id: int | None = None
    assertion_id: int | None = None
    expected: JsonValue = None
    actual: JsonValue = None
    diffs: list[DiffEntry] = field(default_factory=list)

    @property
    def match(self) -> bool:
        return self.status is CompareStatus.MATCH


@dataclass(frozen=True)
class FlowComparison:
    """All compare rows of one flow plus totals."""

    flow_id: int
    rows: list[CompareRow] = field(default_factory=list)
    total_points: int = 0
    total_assertions: int = 0

    @property
    def matches(self) -> int:
        return sum(1 for r in self.rows if r.match)

    @property
    def mismatches(self) -> int:
        return len(self.rows) - self.matches

    @property
    def success(self) -> bool:
        return self.matches == len(self.rows)

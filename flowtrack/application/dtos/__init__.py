"""Application DTOs: storage read-models and reconciliation results."""

from flowtrack.application.dtos.flow import (
    AssertionRecord,
    FlowDetail,
    FlowPage,
    FlowRecord,
    FlowStats,
    FlowSummary,
    PointCreate,
    PointRecord,
    TimelineEntry,
)
from flowtrack.application.dtos.reconciliation import (
    CompareRow,
    DiffEntry,
    Discrepancy,
    FinishResult,
    FlowComparison,
)

__all__ = [
    "AssertionRecord",
    "CompareRow",
    "DiffEntry",
    "Discrepancy",
    "FinishResult",
    "FlowComparison",
    "FlowDetail",
    "FlowPage",
    "FlowRecord",
    "FlowStats",
    "FlowSummary",
    "PointCreate",
    "PointRecord",
    "TimelineEntry",
]

"""Application services: structural comparator, reconciliation, point validation."""

from flowtrack.application.services.comparator import (
    deep_compare,
    deep_compare_json,
    format_diffs,
)
from flowtrack.application.services.point_validator import PointValidator
from flowtrack.application.services.reconciliation import pair_by_index, reconcile

__all__ = [
    "PointValidator",
    "deep_compare",
    "deep_compare_json",
    "format_diffs",
    "pair_by_index",
    "reconcile",
]

"""Reconciliation: pair points with assertions and diff each pair.

Pairing is positional. The i-th point (by creation order) is compared with
the i-th assertion; extra points become missing-assertion discrepancies and
extra assertions become orphan-assertion discrepancies.
"""

from __future__ import annotations

from collections.abc import Sequence

from flowtrack.application.dtos.flow import AssertionRecord, PointRecord
from flowtrack.application.dtos.reconciliation import (
    CompareRow,
    Discrepancy,
    FinishResult,
)
from flowtrack.application.services.comparator import deep_compare, format_diffs
from flowtrack.domain.enums import CompareStatus
from flowtrack.shared.utils.datetime import elapsed_since, utc_now

MISSING_ASSERTION_MESSAGE = "Missing assertion for this point"
ORPHAN_ASSERTION_DESCRIPTION = "Orphan Assertion"


def pair_by_index(
    points: Sequence[PointRecord], assertions: Sequence[AssertionRecord]
) -> list[CompareRow]:
    """Return one CompareRow per index up to the longer of the two sequences."""
    rows: list[CompareRow] = []
    for i in range(max(len(points), len(assertions))):
        if i >= len(assertions):
            p = points[i]
            rows.append(
                CompareRow(
                    index=i,
                    status=CompareStatus.MISSING_ASSERTION,
                    description=p.description,
                    point_id=p.id,
                    expected=p.expected,
                )
            )
            continue
        if i >= len(points):
            a = assertions[i]
            rows.append(
                CompareRow(
                    index=i,
                    status=CompareStatus.ORPHAN_ASSERTION,
                    description=ORPHAN_ASSERTION_DESCRIPTION,
                    assertion_id=a.id,
                    actual=a.actual,
                )
            )
            continue
        p, a = points[i], assertions[i]
        diffs = deep_compare(p.expected, a.actual)
        rows.append(
            CompareRow(
                index=i,
                status=CompareStatus.MISMATCH if diffs else CompareStatus.MATCH,
                description=p.description,
                point_id=p.id,
                assertion_id=a.id,
                expected=p.expected,
                actual=a.actual,
                diffs=diffs,
            )
        )
    return rows


def _to_discrepancy(row: CompareRow) -> Discrepancy:
    if row.status is CompareStatus.MISSING_ASSERTION:
        diff = MISSING_ASSERTION_MESSAGE
    elif row.status is CompareStatus.ORPHAN_ASSERTION:
        n = row.index + 1
        diff = f"Assertion #{n} found without a matching Point #{n}"
    else:
        diff = format_diffs(row.diffs)
    return Discrepancy(
        description=row.description,
        diff=diff,
        timestamp=utc_now(),
        point_id=row.point_id,
        assertion_id=row.assertion_id,
        expected=row.expected,
        actual=row.actual,
    )


def reconcile(
    points: Sequence[PointRecord],
    assertions: Sequence[AssertionRecord],
    started_at: float,
) -> FinishResult:
    """Pair, diff and summarize.

    Args:
        points: Points ordered by creation time.
        assertions: Assertions ordered by creation time.
        started_at: time.monotonic() reading taken when the flow instance was obtained.

    Returns:
        FinishResult with one discrepancy per non-matching index.
    """
    discrepancies = [
        _to_discrepancy(row)
        for row in pair_by_index(points, assertions)
        if not row.match
    ]
    return FinishResult(
        success=not discrepancies,
        discrepancies=discrepancies,
        error_count=len(discrepancies),
        execution_time=elapsed_since(started_at),
    )

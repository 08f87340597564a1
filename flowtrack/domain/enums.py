"""Domain enumerations for flowtrack.

Enums represent fixed sets of domain values (e.g. flow status).
"""

from enum import Enum


class FlowStatus(str, Enum):
    """Flow lifecycle status.

    ACTIVE, INTERRUPTED and FINISHED are persisted. SKIPPED (production mode)
    and SKIPPED_LIMIT (execution limit reached) only exist on in-memory flow
    instances that never touch storage.
    """

    ACTIVE = "ACTIVE"
    INTERRUPTED = "INTERRUPTED"
    FINISHED = "FINISHED"
    SKIPPED = "SKIPPED"
    SKIPPED_LIMIT = "SKIPPED_LIMIT"

    @property
    def is_skipped(self) -> bool:
        """Return True for the unpersisted SKIPPED variants."""
        return self in (FlowStatus.SKIPPED, FlowStatus.SKIPPED_LIMIT)

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]

    @classmethod
    def persisted(cls) -> list["FlowStatus"]:
        """Return statuses that can appear in the flows table."""
        return [cls.ACTIVE, cls.INTERRUPTED, cls.FINISHED]


class CompareStatus(str, Enum):
    """Outcome of pairing one point with one assertion by index."""

    MATCH = "match"
    MISMATCH = "mismatch"
    MISSING_ASSERTION = "missing_assertion"
    ORPHAN_ASSERTION = "orphan_assertion"

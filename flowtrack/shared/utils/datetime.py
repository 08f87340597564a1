"""UTC helpers. Stored and reported timestamps are timezone-aware UTC."""

import time
from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a datetime read back from the database to aware UTC.

    SQLite returns naive values (assumed UTC); aware values are converted.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def elapsed_since(started: float) -> timedelta:
    """Return the wall time elapsed since a time.monotonic() reading."""
    return timedelta(seconds=max(0.0, time.monotonic() - started))

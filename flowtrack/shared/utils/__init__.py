"""Shared utilities: datetime helpers."""

from flowtrack.shared.utils.datetime import elapsed_since, ensure_utc, utc_now

__all__ = ["elapsed_since", "ensure_utc", "utc_now"]

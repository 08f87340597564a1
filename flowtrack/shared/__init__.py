"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from flowtrack.shared.utils import elapsed_since, ensure_utc, utc_now

__all__ = ["elapsed_since", "ensure_utc", "utc_now"]

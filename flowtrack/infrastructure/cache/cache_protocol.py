"""Cache protocol for the flow client (DIP)."""

from typing import Protocol

from flowtrack.application.dtos.flow import FlowRecord


class FlowCacheProtocol(Protocol):
    """Protocol for flow caches keyed by (name, identifier)."""

    def is_available(self) -> bool:
        """Return True if the cache can hold entries."""
        ...

    def get(self, name: str, identifier: str | None) -> FlowRecord | None:
        """Return cached flow or None."""
        ...

    def set(self, name: str, identifier: str | None, flow: FlowRecord) -> None:
        """Store flow for (name, identifier)."""
        ...

    def delete(self, name: str, identifier: str | None) -> None:
        """Remove the entry for (name, identifier)."""
        ...

    def clear(self) -> None:
        """Drop all entries."""
        ...

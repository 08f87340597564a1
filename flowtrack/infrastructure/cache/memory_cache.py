"""Bounded in-memory cache of flow records.

Keyed by (flow name, identifier). Owned by one FlowClient; shared by every
flow instance that client hands out, so all map access holds a lock.
"""

from __future__ import annotations

import logging
import threading

from flowtrack.application.dtos.flow import FlowRecord

logger = logging.getLogger(__name__)

type CacheKey = tuple[str, str]


def _key(name: str, identifier: str | None) -> CacheKey:
    return (name, identifier or "")


class FlowCache:
    """Flow cache with a fixed maximum entry count.

    When disabled, get always misses and set/delete do nothing. When full,
    inserting a new key evicts one arbitrary resident entry first (no
    recency or frequency tracking).

    One exclusive lock guards reads and writes alike; concurrent readers are
    serialized too. Every critical section is a single dict operation, so a
    reader/writer lock is not used.
    """

    def __init__(self, enabled: bool = False, max_size: int = 1000) -> None:
        """Initialize cache.

        Args:
            enabled: Whether entries are stored at all.
            max_size: Maximum resident entries (must be >= 1 when enabled).
        """
        if enabled and max_size < 1:
            raise ValueError(f"max_size must be >= 1 when caching is enabled, got {max_size}")
        self.enabled = enabled
        self.max_size = max_size
        self._entries: dict[CacheKey, FlowRecord] = {}
        self._lock = threading.Lock()

    def is_available(self) -> bool:
        """Return True if the cache stores entries."""
        return self.enabled

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, name: str, identifier: str | None) -> FlowRecord | None:
        """Return cached flow for (name, identifier) or None."""
        if not self.enabled:
            return None
        key = _key(name, identifier)
        with self._lock:
            flow = self._entries.get(key)
        if flow is not None:
            logger.debug("Cache HIT: %s", key)
        else:
            logger.debug("Cache MISS: %s", key)
        return flow

    def set(self, name: str, identifier: str | None, flow: FlowRecord) -> None:
        """Store flow, evicting one arbitrary entry if the cache is full."""
        if not self.enabled:
            return
        key = _key(name, identifier)
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                evicted = next(iter(self._entries))
                del self._entries[evicted]
                logger.debug("Cache EVICT: %s", evicted)
            self._entries[key] = flow
        logger.debug("Cache SET: %s", key)

    def delete(self, name: str, identifier: str | None) -> None:
        """Remove the entry for (name, identifier) if present."""
        if not self.enabled:
            return
        key = _key(name, identifier)
        with self._lock:
            self._entries.pop(key, None)
        logger.debug("Cache DELETE: %s", key)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()
        logger.debug("Cache CLEARED")

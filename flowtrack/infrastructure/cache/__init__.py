"""Cache: bounded in-memory flow cache and its protocol.

Used by the flow client to skip storage round-trips on repeated get_flow calls.
"""

from flowtrack.infrastructure.cache.cache_protocol import FlowCacheProtocol
from flowtrack.infrastructure.cache.memory_cache import FlowCache

__all__ = [
    "FlowCache",
    "FlowCacheProtocol",
]

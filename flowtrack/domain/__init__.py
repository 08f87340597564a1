"""Domain layer: flow statuses, JSON values and the exception taxonomy.

No dependencies on infrastructure or presentation.
"""

from flowtrack.domain.enums import CompareStatus, FlowStatus
from flowtrack.domain.exceptions import (
    ConfigurationException,
    FlowNotFoundException,
    FlowSkippedException,
    FlowTrackException,
    LimitReachedException,
    ResourceNotFoundException,
    SerializationException,
    StorageFailureException,
    is_limit_reached,
    is_not_found,
    is_skipped,
    unwrap,
)
from flowtrack.domain.values import JsonValue, json_kind, to_json_value

__all__ = [
    "CompareStatus",
    "ConfigurationException",
    "FlowNotFoundException",
    "FlowSkippedException",
    "FlowStatus",
    "FlowTrackException",
    "JsonValue",
    "LimitReachedException",
    "ResourceNotFoundException",
    "SerializationException",
    "StorageFailureException",
    "is_limit_reached",
    "is_not_found",
    "is_skipped",
    "json_kind",
    "to_json_value",
    "unwrap",
]

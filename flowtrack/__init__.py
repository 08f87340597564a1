"""flowtrack: cross-service flow tracking and contract-drift detection.

Services record what they expect to happen (points) and what actually
happened (assertions) on a named flow; finishing the flow reconciles the two.
"""

import logging

from flowtrack.application.dtos.flow import FlowRecord
from flowtrack.application.dtos.reconciliation import DiffEntry, Discrepancy, FinishResult
from flowtrack.application.services.comparator import deep_compare, format_diffs
from flowtrack.application.use_cases.flows import FlowClient, FlowClientBuilder, FlowInstance
from flowtrack.core.config import FlowSettings
from flowtrack.domain.enums import FlowStatus
from flowtrack.domain.exceptions import (
    ConfigurationException,
    FlowNotFoundException,
    FlowSkippedException,
    FlowTrackException,
    LimitReachedException,
    SerializationException,
    StorageFailureException,
    is_limit_reached,
    is_not_found,
    is_skipped,
    unwrap,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationException",
    "DiffEntry",
    "Discrepancy",
    "FinishResult",
    "FlowClient",
    "FlowClientBuilder",
    "FlowInstance",
    "FlowNotFoundException",
    "FlowRecord",
    "FlowSettings",
    "FlowSkippedException",
    "FlowStatus",
    "FlowTrackException",
    "LimitReachedException",
    "SerializationException",
    "StorageFailureException",
    "deep_compare",
    "format_diffs",
    "is_limit_reached",
    "is_not_found",
    "is_skipped",
    "unwrap",
]

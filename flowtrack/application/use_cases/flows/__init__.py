"""Flow use cases: client lifecycle (start, get_flow), flow instances, builder, dashboard views."""

from flowtrack.application.use_cases.flows.builder import FlowClientBuilder
from flowtrack.application.use_cases.flows.client import FlowClient
from flowtrack.application.use_cases.flows.dashboard import (
    CompareFlowUseCase,
    GetFlowDetailUseCase,
)
from flowtrack.application.use_cases.flows.instance import FlowInstance

__all__ = [
    "CompareFlowUseCase",
    "FlowClient",
    "FlowClientBuilder",
    "FlowInstance",
    "GetFlowDetailUseCase",
]

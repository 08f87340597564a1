"""Application interfaces (ports) implemented by infrastructure."""

from flowtrack.application.interfaces.repositories import (
    FlowStorageProtocol,
    IDashboardRepository,
)

__all__ = ["FlowStorageProtocol", "IDashboardRepository"]

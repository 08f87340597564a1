"""Persistence repositories. Re-exports for dependency injection."""

from flowtrack.infrastructure.persistence.repositories.base import BaseRepository
from flowtrack.infrastructure.persistence.repositories.dashboard_repo import (
    DashboardRepository,
)
from flowtrack.infrastructure.persistence.repositories.flow_storage import (
    SqlFlowStorage,
)

__all__ = [
    "BaseRepository",
    "DashboardRepository",
    "SqlFlowStorage",
]

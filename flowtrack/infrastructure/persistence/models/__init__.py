"""Persistence models: ORM entities and mixins."""

from flowtrack.infrastructure.persistence.models.flow import Assertion, Flow, Point
from flowtrack.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    IdMixin,
    TimestampMixin,
)

__all__ = [
    "Assertion",
    "CreatedAtMixin",
    "Flow",
    "IdMixin",
    "Point",
    "TimestampMixin",
]

"""Core: configuration, constants, dashboard lifespan and exception handlers."""

from flowtrack.core.config import FlowSettings, get_settings

__all__ = ["FlowSettings", "get_settings"]

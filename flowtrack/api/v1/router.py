"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from flowtrack.api.v1.dependencies.
"""

from fastapi import APIRouter

from flowtrack.api.v1.endpoints import flows, health, stats

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(flows.router, prefix="/flows", tags=["flows"])

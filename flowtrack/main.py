"""Dashboard FastAPI application entry point.

Wiring only: settings, lifespan, exception handlers, CORS, routers. See
flowtrack.core.lifespan and flowtrack.core.exception_handlers.

Settings are resolved inside create_app() so that tests can pass their own
FlowSettings (or set env and clear the get_settings cache) first.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flowtrack.api.v1.router import api_router
from flowtrack.core.config import FlowSettings, get_settings
from flowtrack.core.exception_handlers import register_exception_handlers
from flowtrack.core.lifespan import create_lifespan


def create_app(settings: FlowSettings | None = None) -> FastAPI:
    """Build and return the dashboard application."""
    settings = settings or get_settings()
    app = FastAPI(
        title=f"{settings.app_name} dashboard",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()

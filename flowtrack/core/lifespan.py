"""Dashboard lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Creates the engine and session
factory from app.state.settings, bootstraps the flow schema, wires
telemetry when enabled, and disposes everything on exit.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from flowtrack.core.config import FlowSettings
from flowtrack.domain.exceptions import ConfigurationException
from flowtrack.infrastructure.persistence.database import (
    create_engine,
    create_session_factory,
)
from flowtrack.infrastructure.persistence.repositories.flow_storage import (
    SqlFlowStorage,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: engine, schema, telemetry. Shutdown order: telemetry
    shutdown, engine dispose.
    """
    settings: FlowSettings = app.state.settings
    if not settings.database_url:
        raise ConfigurationException(
            "FLOWTRACK_DATABASE_URL is required to run the dashboard"
        )

    # ---- Startup ----
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    await SqlFlowStorage(engine, settings.timeout_seconds).apply_schema()

    telemetry = None
    if settings.telemetry_enabled:
        from flowtrack.shared.telemetry.telemetry import TelemetryConfig

        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_fastapi(app)
        telemetry.instrument_sqlalchemy(engine)
        logger.info("Telemetry initialized")
    app.state.telemetry = telemetry

    logger.info("Dashboard started (%s)", settings.app_name)
    yield

    # ---- Shutdown ----
    if telemetry is not None:
        telemetry.shutdown()
    await engine.dispose()
    logger.info("Database engine disposed")

"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Each FlowClient (and the dashboard) builds its own engine from its settings;
there is no module-level engine, so independently configured clients can
coexist in one process. Schema is bootstrapped with metadata.create_all
(see SqlFlowStorage.apply_schema).
"""

import logging
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from flowtrack.core.config import FlowSettings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def create_engine(settings: FlowSettings) -> AsyncEngine:
    """Create an AsyncEngine with the configured pool sizing.

    Pool options are only passed for server databases; SQLite uses the
    dialect's default pool.
    """
    url = make_url(settings.database_url)
    kwargs: dict[str, Any] = {
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }
    connect_args: dict[str, Any] = {}
    if url.get_backend_name() != "sqlite":
        kwargs["pool_size"] = (
            settings.db_pool_size if settings.db_pool_size is not None else 10
        )
        kwargs["max_overflow"] = (
            settings.db_max_overflow if settings.db_max_overflow is not None else 20
        )
        kwargs["pool_recycle"] = settings.db_pool_recycle_seconds
    if url.get_driver_name() == "asyncpg":
        connect_args["command_timeout"] = settings.timeout_seconds
    engine = create_async_engine(url, connect_args=connect_args, **kwargs)
    logger.debug(
        "Created engine for %s (backend=%s)",
        url.render_as_string(hide_password=True),
        url.get_backend_name(),
    )
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )

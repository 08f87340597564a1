"""SQLAlchemy mixins for common model patterns (DRY).

Provides: IdMixin, CreatedAtMixin, TimestampMixin.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

# BIGSERIAL on Postgres; INTEGER PRIMARY KEY (rowid alias) on SQLite.
BigIntId = BigInteger().with_variant(Integer, "sqlite")


class IdMixin:
    """Mixin for auto-incrementing numeric primary keys."""

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(BigIntId, primary_key=True, autoincrement=True)


class CreatedAtMixin:
    """Mixin for created_at (server default, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )

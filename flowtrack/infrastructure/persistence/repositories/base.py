"""Base repository: generic read helpers shared by dashboard repositories."""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from flowtrack.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base]:
    """Base repository with get_by_id and count.

    The flow tables are written only by SqlFlowStorage; repositories built on
    this class are read-only views over them.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Return the total number of records."""
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())

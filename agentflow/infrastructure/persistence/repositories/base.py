"""Base repository: team-scoped lookup and insert shared by all repositories."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with team-scoped get, add and the _on_after_create hook.

    Repositories return domain entities or DTOs, never ORM instances, so
    callers cannot lazy-load outside the session.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_model(
        self, entity_id: str, team_id: str, *, for_update: bool = False
    ) -> ModelType | None:
        """Return the row with this id in this team, or None."""
        model: Any = self.model
        stmt = select(self.model).where(model.id == entity_id, model.team_id == team_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to emit events or logs."""

"""Loads work orders, tasks and deliverables as EntitySnapshots (implements IEntityReader)."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.domain.entities.entity_snapshot import EntitySnapshot
from agentflow.infrastructure.persistence.database import Base
from agentflow.infrastructure.persistence.models.work import Deliverable, Task, WorkOrder
from agentflow.shared.enums import EntityType

_MODELS: dict[EntityType, type[Base]] = {
    EntityType.WORK_ORDER: WorkOrder,
    EntityType.TASK: Task,
    EntityType.DELIVERABLE: Deliverable,
}

# Column values that never reach trigger conditions or workflow input.
_EXCLUDED_COLUMNS = frozenset({"id", "team_id"})


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def snapshot_fields(row: Base) -> dict[str, Any]:
    """Column values of an ORM row as JSON-safe data."""
    mapper = sa_inspect(type(row))
    return {
        column.key: _json_value(getattr(row, column.key))
        for column in mapper.column_attrs
        if column.key not in _EXCLUDED_COLUMNS
    }


class SqlEntityReader:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def load(
        self,
        team_id: str,
        entity_type: str,
        entity_id: str,
        *,
        from_status: str | None = None,
        to_status: str | None = None,
    ) -> EntitySnapshot | None:
        kind = EntityType(entity_type)
        model: Any = _MODELS[kind]
        result = await self.db.execute(
            select(model).where(model.id == entity_id, model.team_id == team_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return EntitySnapshot(
            entity_type=kind,
            id=row.id,
            team_id=row.team_id,
            fields=snapshot_fields(row),
            from_status=from_status,
            to_status=to_status,
        )

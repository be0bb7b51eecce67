"""Task repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.application.dtos.work import TaskResult
from agentflow.infrastructure.persistence.models.work import Task
from agentflow.infrastructure.persistence.repositories.base import BaseRepository
from agentflow.shared.enums import TaskStatus
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.utils.datetime import ensure_utc

logger = get_logger(__name__)


def _task_result(row: Task) -> TaskResult:
    return TaskResult(
        id=row.id,
        team_id=row.team_id,
        work_order_id=row.work_order_id,
        title=row.title,
        description=row.description,
        status=row.status,
        estimated_hours=row.estimated_hours,
        position_in_work_order=row.position_in_work_order,
        is_blocked=row.is_blocked,
        due_date=ensure_utc(row.due_date),
    )


class TaskRepository(BaseRepository[Task]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def create(
        self,
        team_id: str,
        work_order_id: str,
        title: str,
        *,
        description: str | None = None,
        estimated_hours: Decimal | None = None,
        position_in_work_order: int | None = None,
        checklist_items: list[Any] | None = None,
        deliverable_id: str | None = None,
    ) -> TaskResult:
        if position_in_work_order is None:
            position_in_work_order = await self._next_position(work_order_id)
        row = await self.add(
            Task(
                team_id=team_id,
                work_order_id=work_order_id,
                deliverable_id=deliverable_id,
                title=title[:500],
                description=description,
                status=TaskStatus.TODO.value,
                estimated_hours=estimated_hours,
                position_in_work_order=position_in_work_order,
                checklist_items=list(checklist_items or []),
            )
        )
        return _task_result(row)

    async def list_for_work_order(self, work_order_id: str, team_id: str) -> list[TaskResult]:
        result = await self.db.execute(
            select(Task)
            .where(Task.work_order_id == work_order_id, Task.team_id == team_id)
            .order_by(Task.position_in_work_order.asc(), Task.created_at.asc())
        )
        return [_task_result(row) for row in result.scalars().all()]

    async def _next_position(self, work_order_id: str) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Task.position_in_work_order), 0)).where(
                Task.work_order_id == work_order_id
            )
        )
        return int(result.scalar_one()) + 1

    async def _on_after_create(self, obj: Task) -> None:
        logger.info("Task %s created for work order %s", obj.id, obj.work_order_id)

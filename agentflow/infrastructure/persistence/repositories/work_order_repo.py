"""WorkOrder repository."""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.application.dtos.work import WorkOrderResult
from agentflow.infrastructure.persistence.models.work import WorkOrder
from agentflow.infrastructure.persistence.repositories.base import BaseRepository
from agentflow.shared.utils.datetime import ensure_utc


def work_order_result(row: WorkOrder) -> WorkOrderResult:
    return WorkOrderResult(
        id=row.id,
        team_id=row.team_id,
        title=row.title,
        description=row.description,
        status=row.status,
        pm_copilot_mode=row.pm_copilot_mode,
        project_id=row.project_id,
        budget_cost=row.budget_cost,
        estimated_hours=row.estimated_hours,
        actual_hours=row.actual_hours,
        due_date=ensure_utc(row.due_date),
        acceptance_criteria=list(row.acceptance_criteria or []),
        tags=list(row.tags or []),
    )


class WorkOrderRepository(BaseRepository[WorkOrder]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkOrder)

    async def get_for_team(self, work_order_id: str, team_id: str) -> WorkOrderResult | None:
        row = await self.get_model(work_order_id, team_id)
        return work_order_result(row) if row else None

    async def set_pm_copilot_mode(
        self, work_order_id: str, team_id: str, mode: str
    ) -> WorkOrderResult | None:
        result = await self.db.execute(
            update(WorkOrder)
            .where(WorkOrder.id == work_order_id, WorkOrder.team_id == team_id)
            .values(pm_copilot_mode=mode)
            .returning(WorkOrder.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            return None
        return await self.get_for_team(work_order_id, team_id)

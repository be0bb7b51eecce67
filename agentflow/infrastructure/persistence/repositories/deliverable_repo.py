"""Deliverable repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.application.dtos.work import DeliverableResult
from agentflow.infrastructure.persistence.models.work import Deliverable
from agentflow.infrastructure.persistence.repositories.base import BaseRepository
from agentflow.shared.enums import DeliverableStatus
from agentflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _deliverable_result(row: Deliverable) -> DeliverableResult:
    return DeliverableResult(
        id=row.id,
        team_id=row.team_id,
        work_order_id=row.work_order_id,
        title=row.title,
        description=row.description,
        deliverable_type=row.deliverable_type,
        status=row.status,
    )


class DeliverableRepository(BaseRepository[Deliverable]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Deliverable)

    async def create(
        self,
        team_id: str,
        work_order_id: str,
        title: str,
        *,
        description: str | None = None,
        deliverable_type: str | None = None,
        acceptance_criteria: list[Any] | None = None,
        project_id: str | None = None,
    ) -> DeliverableResult:
        row = await self.add(
            Deliverable(
                team_id=team_id,
                work_order_id=work_order_id,
                project_id=project_id,
                title=title[:500],
                description=description,
                deliverable_type=deliverable_type,
                status=DeliverableStatus.DRAFT.value,
                acceptance_criteria=list(acceptance_criteria or []),
            )
        )
        return _deliverable_result(row)

    async def list_for_work_order(
        self, work_order_id: str, team_id: str
    ) -> list[DeliverableResult]:
        result = await self.db.execute(
            select(Deliverable)
            .where(Deliverable.work_order_id == work_order_id, Deliverable.team_id == team_id)
            .order_by(Deliverable.created_at.asc(), Deliverable.id.asc())
        )
        return [_deliverable_result(row) for row in result.scalars().all()]

    async def _on_after_create(self, obj: Deliverable) -> None:
        logger.info("Deliverable %s created for work order %s", obj.id, obj.work_order_id)

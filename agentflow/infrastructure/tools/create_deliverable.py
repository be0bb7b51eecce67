"""create_deliverable: add a draft deliverable to a work order."""

from __future__ import annotations

from typing import Any

from agentflow.application.dtos.tool import ToolOutput
from agentflow.application.interfaces.repositories import IDeliverableRepository
from agentflow.domain.exceptions import ValidationException
from agentflow.shared.enums import ToolCategory


class CreateDeliverableTool:
    name = "create_deliverable"
    category = ToolCategory.DELIVERABLES
    description = "Create a draft deliverable on a work order."

    def __init__(self, deliverable_repo: IDeliverableRepository) -> None:
        self._deliverable_repo = deliverable_repo

    async def execute(self, team_id: str, params: dict[str, Any]) -> ToolOutput:
        work_order_id = params.get("work_order_id")
        title = params.get("title")
        if not work_order_id or not title:
            raise ValidationException("work_order_id and title are required")
        deliverable = await self._deliverable_repo.create(
            team_id,
            str(work_order_id),
            str(title),
            description=params.get("description"),
            deliverable_type=params.get("deliverable_type"),
            acceptance_criteria=params.get("acceptance_criteria"),
            project_id=params.get("project_id"),
        )
        return ToolOutput(data={"id": deliverable.id, "title": deliverable.title})

"""create_task: add a todo task to a work order."""

from __future__ import annotations

from typing import Any

from agentflow.application.dtos.tool import ToolOutput
from agentflow.application.interfaces.repositories import ITaskRepository
from agentflow.domain.exceptions import ValidationException
from agentflow.domain.value_objects.conditions import to_decimal
from agentflow.shared.enums import ToolCategory


class CreateTaskTool:
    name = "create_task"
    category = ToolCategory.TASKS
    description = "Create a task on a work order, optionally under a deliverable."

    def __init__(self, task_repo: ITaskRepository) -> None:
        self._task_repo = task_repo

    async def execute(self, team_id: str, params: dict[str, Any]) -> ToolOutput:
        work_order_id = params.get("work_order_id")
        title = params.get("title")
        if not work_order_id or not title:
            raise ValidationException("work_order_id and title are required")
        position = params.get("position_in_work_order")
        task = await self._task_repo.create(
            team_id,
            str(work_order_id),
            str(title),
            description=params.get("description"),
            estimated_hours=to_decimal(params.get("estimated_hours")),
            position_in_work_order=int(position) if isinstance(position, int) else None,
            checklist_items=params.get("checklist_items"),
            deliverable_id=params.get("deliverable_id"),
        )
        return ToolOutput(data={"id": task.id, "title": task.title})

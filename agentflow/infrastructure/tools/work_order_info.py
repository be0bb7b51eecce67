"""work_order_info: read-only planning context for a work order."""

from __future__ import annotations

from typing import Any

from agentflow.application.dtos.tool import ToolOutput
from agentflow.application.services.work_order_context import WorkOrderContextBuilder
from agentflow.domain.exceptions import ResourceNotFoundException, ValidationException
from agentflow.shared.enums import ToolCategory


class WorkOrderInfoTool:
    name = "work_order_info"
    category = ToolCategory.CONTEXT
    description = "Work order details with existing deliverables and open tasks."

    def __init__(self, context_builder: WorkOrderContextBuilder) -> None:
        self._context_builder = context_builder

    async def execute(self, team_id: str, params: dict[str, Any]) -> ToolOutput:
        work_order_id = params.get("work_order_id")
        if not work_order_id:
            raise ValidationException("work_order_id is required", field="work_order_id")
        info = await self._context_builder.build(team_id, str(work_order_id))
        if info is None:
            raise ResourceNotFoundException("WorkOrder", str(work_order_id))
        return ToolOutput(data=info)

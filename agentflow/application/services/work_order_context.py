"""Work order planning context: the work order plus its existing deliverables and open tasks."""

from __future__ import annotations

from typing import Any

from agentflow.application.interfaces.repositories import (
    IDeliverableRepository,
    ITaskRepository,
    IWorkOrderRepository,
)
from agentflow.shared.enums import TaskStatus


class WorkOrderContextBuilder:
    def __init__(
        self,
        work_order_repo: IWorkOrderRepository,
        deliverable_repo: IDeliverableRepository,
        task_repo: ITaskRepository,
    ) -> None:
        self._work_order_repo = work_order_repo
        self._deliverable_repo = deliverable_repo
        self._task_repo = task_repo

    async def build(self, team_id: str, work_order_id: str) -> dict[str, Any] | None:
        """Return {work_order, deliverables, pending_tasks, task_count}, or None when missing."""
        work_order = await self._work_order_repo.get_for_team(work_order_id, team_id)
        if work_order is None:
            return None
        deliverables = await self._deliverable_repo.list_for_work_order(work_order_id, team_id)
        tasks = await self._task_repo.list_for_work_order(work_order_id, team_id)
        return {
            "work_order": work_order.to_context(),
            "deliverables": [d.to_context() for d in deliverables],
            "pending_tasks": [
                t.to_context() for t in tasks if t.status != TaskStatus.DONE.value
            ],
            "task_count": len(tasks),
        }

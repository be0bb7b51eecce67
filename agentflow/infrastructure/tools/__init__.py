"""Built-in agent tools and the registry factory."""

from __future__ import annotations

from agentflow.application.interfaces.repositories import (
    IDeliverableRepository,
    ITaskRepository,
)
from agentflow.application.interfaces.services import IAgentRunner, IPromptRenderer
from agentflow.application.services.tool_registry import ToolRegistry
from agentflow.application.services.work_order_context import WorkOrderContextBuilder
from agentflow.infrastructure.tools.create_deliverable import CreateDeliverableTool
from agentflow.infrastructure.tools.create_task import CreateTaskTool
from agentflow.infrastructure.tools.llm_completion import LLMCompletionTool
from agentflow.infrastructure.tools.work_order_info import WorkOrderInfoTool


def build_tool_registry(
    context_builder: WorkOrderContextBuilder,
    deliverable_repo: IDeliverableRepository,
    task_repo: ITaskRepository,
    *,
    runner: IAgentRunner | None = None,
    renderer: IPromptRenderer | None = None,
) -> ToolRegistry:
    """Registry with the built-in tools; llm_completion only when a runner is configured."""
    registry = ToolRegistry(
        [
            WorkOrderInfoTool(context_builder),
            CreateDeliverableTool(deliverable_repo),
            CreateTaskTool(task_repo),
        ]
    )
    if runner is not None and renderer is not None:
        registry.register(LLMCompletionTool(runner, renderer))
    return registry


__all__ = [
    "CreateDeliverableTool",
    "CreateTaskTool",
    "LLMCompletionTool",
    "WorkOrderInfoTool",
    "build_tool_registry",
]

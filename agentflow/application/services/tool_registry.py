"""Tool registry: named agent tools and the permission each category needs."""

from __future__ import annotations

from agentflow.application.interfaces.services import IAgentTool
from agentflow.shared.enums import ToolCategory

CATEGORY_PERMISSIONS: dict[ToolCategory, tuple[str, ...]] = {
    ToolCategory.CONTEXT: (),
    ToolCategory.TASKS: ("can_modify_tasks",),
    ToolCategory.WORK_ORDERS: ("can_create_work_orders",),
    ToolCategory.CLIENT_DATA: ("can_access_client_data",),
    ToolCategory.EMAIL: ("can_send_emails",),
    ToolCategory.DELIVERABLES: ("can_modify_deliverables",),
    ToolCategory.FINANCIAL: ("can_access_financial_data",),
    ToolCategory.PLAYBOOKS: ("can_modify_playbooks",),
}


class ToolRegistry:
    """Holds the tools available to agents in one unit of work."""

    def __init__(self, tools: list[IAgentTool] | None = None) -> None:
        self._tools: dict[str, IAgentTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: IAgentTool) -> None:
        """Add a tool; a second tool with the same name replaces the first."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> IAgentTool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return sorted(self._tools)

    def required_permissions(self, tool: IAgentTool) -> tuple[str, ...]:
        """Permission flags the tool's category requires."""
        return CATEGORY_PERMISSIONS.get(tool.category, ())

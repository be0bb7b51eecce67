"""Work order agent settings schemas."""

from pydantic import BaseModel

from agentflow.shared.enums import PMCopilotMode


class AgentSettingsUpdate(BaseModel):
    """Request body for PATCH /work-orders/{id}/agent-settings."""

    pm_copilot_mode: PMCopilotMode


class WorkOrderAgentSettings(BaseModel):
    id: str
    pm_copilot_mode: PMCopilotMode


class AgentSettingsResponse(BaseModel):
    success: bool = True
    work_order: WorkOrderAgentSettings

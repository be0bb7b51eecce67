"""Whole-workflow approval schemas."""

from pydantic import BaseModel, Field


class InboxRejectRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=2000)


class WorkflowDecisionResponse(BaseModel):
    """Workflow state after an approve or reject decision."""

    success: bool = True
    workflow_state_id: str
    status: str

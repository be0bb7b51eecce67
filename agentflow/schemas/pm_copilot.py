"""PM Copilot API schemas: manual trigger and per-suggestion review."""

from typing import Any

from pydantic import BaseModel, Field

from agentflow.shared.enums import SuggestionType


class PMCopilotTriggerResponse(BaseModel):
    """Response for POST /work-orders/{id}/pm-copilot/trigger."""

    success: bool = True
    workflow_state_id: str
    status: str = Field(..., description="Workflow status after the in-request run")


class PMCopilotSuggestionsResponse(BaseModel):
    """Suggestions of the latest paused (else completed) run, verbatim from state_data."""

    success: bool = True
    workflow_state_id: str
    status: str
    deliverable_suggestions: list[dict[str, Any]]
    task_suggestions: list[dict[str, Any]]


class SuggestionApproveRequest(BaseModel):
    """Request body for approving one suggestion."""

    suggestion_type: SuggestionType
    suggestion_index: int = Field(..., description="Position in the stored suggestion list")


class SuggestionRejectRequest(SuggestionApproveRequest):
    """Request body for rejecting one suggestion."""

    reason: str | None = Field(default=None, max_length=2000)


class SuggestionApproveResponse(BaseModel):
    success: bool = True
    message: str = "Suggestion approved"
    created_id: str | None = None


class SuggestionRejectResponse(BaseModel):
    success: bool = True
    message: str = "Suggestion rejected"

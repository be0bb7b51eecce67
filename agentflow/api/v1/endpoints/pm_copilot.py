"""Per-suggestion approve/reject for a PM Copilot run (identified by its inbox item)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from agentflow.api.v1.dependencies import get_suggestion_service, get_team_id, get_user_id
from agentflow.application.use_cases.workflows import SuggestionService
from agentflow.core.limiter import limit_writes
from agentflow.schemas.pm_copilot import (
    SuggestionApproveRequest,
    SuggestionApproveResponse,
    SuggestionRejectRequest,
    SuggestionRejectResponse,
)

router = APIRouter()


@router.post("/suggestions/{inbox_item_id}/approve", response_model=SuggestionApproveResponse)
@limit_writes
async def approve_suggestion(
    request: Request,
    inbox_item_id: str,
    body: SuggestionApproveRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    user_id: Annotated[str | None, Depends(get_user_id)],
    service: Annotated[SuggestionService, Depends(get_suggestion_service)],
):
    """Create the Deliverable or Task for one pending suggestion."""
    result = await service.approve(
        team_id, inbox_item_id, body.suggestion_type.value, body.suggestion_index, user_id
    )
    return SuggestionApproveResponse(created_id=result.created_id)


@router.post("/suggestions/{inbox_item_id}/reject", response_model=SuggestionRejectResponse)
@limit_writes
async def reject_suggestion(
    request: Request,
    inbox_item_id: str,
    body: SuggestionRejectRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    user_id: Annotated[str | None, Depends(get_user_id)],
    service: Annotated[SuggestionService, Depends(get_suggestion_service)],
):
    await service.reject(
        team_id,
        inbox_item_id,
        body.suggestion_type.value,
        body.suggestion_index,
        body.reason,
        user_id,
    )
    return SuggestionRejectResponse()

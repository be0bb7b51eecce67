"""Whole-workflow approve/reject through the workflow's inbox item."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Request

from agentflow.api.v1.dependencies import get_inbox_decision_handler, get_team_id, get_user_id
from agentflow.application.use_cases.workflows import InboxDecisionHandler
from agentflow.core.limiter import limit_writes
from agentflow.schemas.inbox import InboxRejectRequest, WorkflowDecisionResponse

router = APIRouter()


@router.post("/{item_id}/approve", response_model=WorkflowDecisionResponse)
@limit_writes
async def approve_inbox_item(
    request: Request,
    item_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    user_id: Annotated[str | None, Depends(get_user_id)],
    handler: Annotated[InboxDecisionHandler, Depends(get_inbox_decision_handler)],
):
    """Approve the item and resume its paused workflow to the next pause or completion."""
    state = await handler.handle_approval(team_id, item_id, user_id)
    return WorkflowDecisionResponse(workflow_state_id=state.id, status=state.status.value)


@router.post("/{item_id}/reject", response_model=WorkflowDecisionResponse)
@limit_writes
async def reject_inbox_item(
    request: Request,
    item_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    user_id: Annotated[str | None, Depends(get_user_id)],
    handler: Annotated[InboxDecisionHandler, Depends(get_inbox_decision_handler)],
    body: Annotated[InboxRejectRequest | None, Body()] = None,
):
    reason = body.reason if body else None
    state = await handler.handle_rejection(team_id, item_id, user_id, reason)
    return WorkflowDecisionResponse(workflow_state_id=state.id, status=state.status.value)

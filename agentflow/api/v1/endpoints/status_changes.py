"""Status change notifications from the CRUD layer: match triggers and enqueue chain jobs."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from agentflow.api.v1.dependencies import get_status_change_handler, get_team_id, get_user_id
from agentflow.application.dtos.trigger import StatusChange
from agentflow.application.use_cases.triggers import StatusChangeHandler
from agentflow.core.limiter import limit_writes
from agentflow.schemas.status_change import DispatchResponse, StatusChangeRequest

router = APIRouter()


@router.post("", response_model=DispatchResponse)
@limit_writes
async def report_status_change(
    request: Request,
    body: StatusChangeRequest,
    team_id: Annotated[str, Depends(get_team_id)],
    user_id: Annotated[str | None, Depends(get_user_id)],
    handler: Annotated[StatusChangeHandler, Depends(get_status_change_handler)],
):
    report = await handler.handle(
        StatusChange(
            team_id=team_id,
            entity_type=body.entity_type.value,
            entity_id=body.entity_id,
            from_status=body.from_status,
            to_status=body.to_status,
            acting_user_id=user_id,
        )
    )
    return DispatchResponse(
        dispatched=report.dispatched, suppressed=report.suppressed, failed=report.failed
    )

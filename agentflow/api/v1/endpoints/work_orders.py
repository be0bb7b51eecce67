"""Work order routes: manual PM Copilot run, suggestion listing, agent settings."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from agentflow.api.v1.dependencies import (
    get_start_pm_copilot,
    get_suggestion_reader,
    get_team_id,
    get_user_id,
    get_work_order_repo_for_write,
)
from agentflow.application.interfaces.repositories import IWorkOrderRepository
from agentflow.application.use_cases.workflows import StartPMCopilot, SuggestionService
from agentflow.core.limiter import limit_workflow_trigger, limit_writes
from agentflow.domain.exceptions import ResourceNotFoundException
from agentflow.schemas.pm_copilot import PMCopilotSuggestionsResponse, PMCopilotTriggerResponse
from agentflow.schemas.work_order import (
    AgentSettingsResponse,
    AgentSettingsUpdate,
    WorkOrderAgentSettings,
)

router = APIRouter()


@router.post("/{work_order_id}/pm-copilot/trigger", response_model=PMCopilotTriggerResponse)
@limit_workflow_trigger
async def trigger_pm_copilot(
    request: Request,
    work_order_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    user_id: Annotated[str | None, Depends(get_user_id)],
    use_case: Annotated[StartPMCopilot, Depends(get_start_pm_copilot)],
):
    """Run the PM Copilot for a work order in-request.

    In staged mode the returned state is already paused at the deliverables
    checkpoint.
    """
    state = await use_case.execute(team_id, work_order_id, user_id)
    return PMCopilotTriggerResponse(workflow_state_id=state.id, status=state.status.value)


@router.get(
    "/{work_order_id}/pm-copilot/suggestions", response_model=PMCopilotSuggestionsResponse
)
async def list_pm_copilot_suggestions(
    work_order_id: str,
    team_id: Annotated[str, Depends(get_team_id)],
    service: Annotated[SuggestionService, Depends(get_suggestion_reader)],
):
    pending = await service.list_pending(team_id, work_order_id)
    return PMCopilotSuggestionsResponse(
        workflow_state_id=pending.workflow_state_id,
        status=pending.status,
        deliverable_suggestions=pending.deliverable_suggestions,
        task_suggestions=pending.task_suggestions,
    )


@router.patch("/{work_order_id}/agent-settings", response_model=AgentSettingsResponse)
@limit_writes
async def update_agent_settings(
    request: Request,
    work_order_id: str,
    body: AgentSettingsUpdate,
    team_id: Annotated[str, Depends(get_team_id)],
    work_order_repo: Annotated[IWorkOrderRepository, Depends(get_work_order_repo_for_write)],
):
    """Switch the work order between staged and full PM Copilot runs."""
    work_order = await work_order_repo.set_pm_copilot_mode(
        work_order_id, team_id, body.pm_copilot_mode.value
    )
    if work_order is None:
        raise ResourceNotFoundException("WorkOrder", work_order_id)
    return AgentSettingsResponse(
        work_order=WorkOrderAgentSettings(
            id=work_order.id, pm_copilot_mode=work_order.pm_copilot_mode
        )
    )

"""Internal routes for the scheduler. Guarded by the shared internal token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from agentflow.api.v1.dependencies import get_reset_agent_spend, require_internal_token
from agentflow.application.use_cases.budget import ResetAgentSpend
from agentflow.core.limiter import limit_writes
from agentflow.schemas.internal import SpendResetResponse

router = APIRouter(dependencies=[Depends(require_internal_token)])


@router.post("/agent-spend/reset", response_model=SpendResetResponse)
@limit_writes
async def reset_agent_spend(
    request: Request,
    use_case: Annotated[ResetAgentSpend, Depends(get_reset_agent_spend)],
):
    """Zero stale daily (and, on the 1st, monthly) spend counters."""
    result = await use_case.execute()
    return SpendResetResponse(daily_reset=result.daily_reset, monthly_reset=result.monthly_reset)

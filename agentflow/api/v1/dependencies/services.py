"""Use-case dependencies (composition root for routes).

Each request gets a ServiceContainer over its DB session plus the
process-wide queue, LLM runner and prompt renderer from app.state.
Routes depend on the use-case getters below, so tests can override them.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.application.interfaces.repositories import IWorkOrderRepository
from agentflow.application.use_cases.budget import ResetAgentSpend
from agentflow.application.use_cases.triggers import StatusChangeHandler
from agentflow.application.use_cases.workflows import (
    InboxDecisionHandler,
    StartPMCopilot,
    SuggestionService,
)
from agentflow.core.config import get_settings
from agentflow.domain.exceptions import QueueUnavailableException
from agentflow.infrastructure.container import ServiceContainer
from agentflow.infrastructure.persistence.database import get_db, get_db_transactional


def _container(request: Request, db: AsyncSession) -> ServiceContainer:
    state = request.app.state
    return ServiceContainer(
        db,
        get_settings(),
        queue=getattr(state, "job_queue", None),
        agent_runner=getattr(state, "agent_runner", None),
        renderer=getattr(state, "prompt_renderer", None),
    )


async def get_container(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ServiceContainer:
    """Container over a transactional session (write routes)."""
    return _container(request, db)


async def get_read_container(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ServiceContainer:
    """Container over a plain session (read routes)."""
    return _container(request, db)


async def get_start_pm_copilot(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> StartPMCopilot:
    return container.start_pm_copilot()


async def get_suggestion_service(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> SuggestionService:
    return container.suggestion_service()


async def get_suggestion_reader(
    container: Annotated[ServiceContainer, Depends(get_read_container)],
) -> SuggestionService:
    """SuggestionService for list_pending (no transaction)."""
    return container.suggestion_service()


async def get_work_order_repo_for_write(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> IWorkOrderRepository:
    return container.work_order_repo


async def get_status_change_handler(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> StatusChangeHandler:
    if container.queue is None:
        raise QueueUnavailableException("Job queue is not connected")
    return container.status_change_handler()


async def get_inbox_decision_handler(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> InboxDecisionHandler:
    return container.inbox_decision_handler()


async def get_reset_agent_spend(
    container: Annotated[ServiceContainer, Depends(get_container)],
) -> ResetAgentSpend:
    return container.reset_agent_spend()

"""AgentWorkflowState repository."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.domain.entities.workflow_state import WorkflowStateEntity
from agentflow.infrastructure.persistence.models.workflow_state import AgentWorkflowState
from agentflow.infrastructure.persistence.repositories.base import BaseRepository
from agentflow.shared.enums import WorkflowStatus
from agentflow.shared.utils.datetime import ensure_utc


def _state_entity(row: AgentWorkflowState) -> WorkflowStateEntity:
    return WorkflowStateEntity(
        id=row.id,
        team_id=row.team_id,
        workflow_class=row.workflow_class,
        status=WorkflowStatus(row.status),
        current_node=row.current_node,
        state_data=dict(row.state_data or {}),
        ai_agent_id=row.ai_agent_id,
        agent_trigger_id=row.agent_trigger_id,
        subject_type=row.subject_type,
        subject_id=row.subject_id,
        paused_at=ensure_utc(row.paused_at),
        pause_reason=row.pause_reason,
        resumed_at=ensure_utc(row.resumed_at),
        approval_required=row.approval_required,
        completed_at=ensure_utc(row.completed_at),
        failed_at=ensure_utc(row.failed_at),
        error_message=row.error_message,
        created_at=ensure_utc(row.created_at),
    )


class WorkflowStateRepository(BaseRepository[AgentWorkflowState]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AgentWorkflowState)

    async def create(self, state: WorkflowStateEntity) -> WorkflowStateEntity:
        row = await self.add(
            AgentWorkflowState(
                id=state.id,
                team_id=state.team_id,
                ai_agent_id=state.ai_agent_id,
                agent_trigger_id=state.agent_trigger_id,
                workflow_class=state.workflow_class,
                status=state.status.value,
                current_node=state.current_node,
                state_data=state.state_data,
                subject_type=state.subject_type,
                subject_id=state.subject_id,
            )
        )
        return _state_entity(row)

    async def save(self, state: WorkflowStateEntity) -> None:
        await self.db.execute(
            update(AgentWorkflowState)
            .where(
                AgentWorkflowState.id == state.id,
                AgentWorkflowState.team_id == state.team_id,
            )
            .values(
                status=state.status.value,
                current_node=state.current_node,
                state_data=state.state_data,
                paused_at=state.paused_at,
                pause_reason=state.pause_reason,
                resumed_at=state.resumed_at,
                approval_required=state.approval_required,
                completed_at=state.completed_at,
                failed_at=state.failed_at,
                error_message=state.error_message,
            )
            .execution_options(synchronize_session=False)
        )

    async def get_by_id(
        self, state_id: str, team_id: str, *, for_update: bool = False
    ) -> WorkflowStateEntity | None:
        row = await self.get_model(state_id, team_id, for_update=for_update)
        return _state_entity(row) if row else None

    async def latest_for_subject(
        self,
        team_id: str,
        workflow_class: str,
        subject_type: str,
        subject_id: str,
        statuses: tuple[str, ...],
    ) -> WorkflowStateEntity | None:
        result = await self.db.execute(
            select(AgentWorkflowState)
            .where(
                AgentWorkflowState.team_id == team_id,
                AgentWorkflowState.workflow_class == workflow_class,
                AgentWorkflowState.subject_type == subject_type,
                AgentWorkflowState.subject_id == subject_id,
                AgentWorkflowState.status.in_(statuses),
            )
            .order_by(AgentWorkflowState.created_at.desc(), AgentWorkflowState.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _state_entity(row) if row else None

"""AgentChainExecution repository (one row per picked-up trigger firing)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.domain.entities.trigger import ChainExecutionEntity
from agentflow.infrastructure.persistence.models.trigger import AgentChainExecution
from agentflow.infrastructure.persistence.repositories.base import BaseRepository
from agentflow.shared.enums import ChainExecutionStatus
from agentflow.shared.utils.datetime import ensure_utc


def _execution_entity(row: AgentChainExecution) -> ChainExecutionEntity:
    return ChainExecutionEntity(
        id=row.id,
        team_id=row.team_id,
        agent_trigger_id=row.agent_trigger_id,
        agent_chain_id=row.agent_chain_id,
        status=ChainExecutionStatus(row.execution_status),
        workflow_key=row.workflow_key,
        workflow_state_id=row.agent_workflow_state_id,
        triggerable_type=row.triggerable_type,
        triggerable_id=row.triggerable_id,
        attempt=row.attempt,
        reason=row.reason,
        started_at=ensure_utc(row.started_at),
    )


class ChainExecutionRepository(BaseRepository[AgentChainExecution]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AgentChainExecution)

    async def record(self, execution: ChainExecutionEntity) -> ChainExecutionEntity:
        row = await self.add(
            AgentChainExecution(
                id=execution.id,
                team_id=execution.team_id,
                agent_trigger_id=execution.agent_trigger_id,
                agent_chain_id=execution.agent_chain_id,
                agent_workflow_state_id=execution.workflow_state_id,
                execution_status=execution.status.value,
                workflow_key=execution.workflow_key,
                triggerable_type=execution.triggerable_type,
                triggerable_id=execution.triggerable_id,
                attempt=execution.attempt,
                reason=execution.reason,
                started_at=execution.started_at,
            )
        )
        return _execution_entity(row)

    async def list_for_trigger(self, team_id: str, trigger_id: str) -> list[ChainExecutionEntity]:
        result = await self.db.execute(
            select(AgentChainExecution)
            .where(
                AgentChainExecution.team_id == team_id,
                AgentChainExecution.agent_trigger_id == trigger_id,
            )
            .order_by(AgentChainExecution.started_at.desc(), AgentChainExecution.id.desc())
        )
        return [_execution_entity(row) for row in result.scalars().all()]

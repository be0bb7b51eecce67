"""AgentActivityLog repository (append-only)."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.infrastructure.persistence.models.agent import AgentActivityLog
from agentflow.infrastructure.persistence.repositories.base import BaseRepository


class ActivityLogRepository(BaseRepository[AgentActivityLog]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AgentActivityLog)

    async def record(
        self,
        team_id: str,
        agent_configuration_id: str,
        tool_name: str,
        status: str,
        *,
        cost: Decimal = Decimal("0"),
        duration_ms: int = 0,
        input_summary: dict[str, Any] | None = None,
        error: str | None = None,
        workflow_state_id: str | None = None,
    ) -> None:
        self.db.add(
            AgentActivityLog(
                team_id=team_id,
                agent_configuration_id=agent_configuration_id,
                tool_name=tool_name,
                status=status,
                cost=cost,
                duration_ms=duration_ms,
                input_summary=input_summary,
                error=error,
                workflow_state_id=workflow_state_id,
            )
        )
        await self.db.flush()

"""AgentTrigger repository: candidate query and the atomic last-fired update."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.domain.entities.trigger import ChainEntity, TriggerEntity
from agentflow.infrastructure.persistence.models.trigger import AgentChain, AgentTrigger
from agentflow.infrastructure.persistence.repositories.base import BaseRepository
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.utils.datetime import ensure_utc

logger = get_logger(__name__)


def _chain_entity(chain: AgentChain | None) -> ChainEntity | None:
    if chain is None:
        return None
    return ChainEntity(
        id=chain.id,
        team_id=chain.team_id,
        name=chain.name,
        workflow_key=chain.workflow_key,
        enabled=chain.enabled,
        ai_agent_id=chain.ai_agent_id,
    )


def _conditions_map(row: AgentTrigger) -> dict[str, Any]:
    raw = row.trigger_conditions
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        logger.warning(
            "Trigger %s has non-map trigger_conditions (%s); treating as empty",
            row.id,
            type(raw).__name__,
        )
        return {}
    return dict(raw)


def _trigger_entity(row: AgentTrigger) -> TriggerEntity:
    return TriggerEntity(
        id=row.id,
        team_id=row.team_id,
        name=row.name,
        entity_type=row.entity_type,
        status_from=row.status_from,
        status_to=row.status_to,
        priority=row.priority,
        enabled=row.enabled,
        trigger_conditions=_conditions_map(row),
        last_triggered_at=ensure_utc(row.last_triggered_at),
        chain=_chain_entity(row.chain),
        created_at=ensure_utc(row.created_at),
    )


class TriggerRepository(BaseRepository[AgentTrigger]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AgentTrigger)

    async def find_candidates(
        self,
        team_id: str,
        entity_type: str,
        from_status: str | None,
        to_status: str | None,
    ) -> list[TriggerEntity]:
        result = await self.db.execute(
            select(AgentTrigger)
            .where(
                AgentTrigger.team_id == team_id,
                AgentTrigger.enabled.is_(True),
                AgentTrigger.entity_type == entity_type,
                or_(AgentTrigger.status_from.is_(None), AgentTrigger.status_from == from_status),
                or_(AgentTrigger.status_to.is_(None), AgentTrigger.status_to == to_status),
            )
            .order_by(
                AgentTrigger.priority.desc(),
                AgentTrigger.created_at.asc(),
                AgentTrigger.id.asc(),
            )
        )
        return [_trigger_entity(row) for row in result.unique().scalars().all()]

    async def get_by_id(self, trigger_id: str, team_id: str) -> TriggerEntity | None:
        row = await self.get_model(trigger_id, team_id)
        return _trigger_entity(row) if row else None

    async def mark_fired(
        self, trigger_id: str, now: datetime, window_minutes: float | None
    ) -> bool:
        """Compare-and-set last_triggered_at; False when a concurrent firing won."""
        stmt = update(AgentTrigger).where(AgentTrigger.id == trigger_id)
        if window_minutes is not None:
            cutoff = now - timedelta(minutes=window_minutes)
            stmt = stmt.where(
                or_(
                    AgentTrigger.last_triggered_at.is_(None),
                    AgentTrigger.last_triggered_at <= cutoff,
                )
            )
        stmt = (
            stmt.values(last_triggered_at=now)
            .returning(AgentTrigger.id)
            .execution_options(synchronize_session=False)
        )
        async with self.db.begin_nested():
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none() is not None

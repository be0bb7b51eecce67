"""AgentConfiguration repository: lookups and atomic spend counters.

Spend is only ever changed by single UPDATE statements; stale day/month
counters are rolled over inside the same statement with CASE.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import case, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.domain.entities.agent_configuration import (
    PERMISSION_FLAGS,
    AgentConfigurationEntity,
)
from agentflow.infrastructure.persistence.models.agent import AgentConfiguration, AIAgent
from agentflow.infrastructure.persistence.repositories.base import BaseRepository
from agentflow.shared.utils.datetime import month_period, utc_today


def _config_entity(row: AgentConfiguration) -> AgentConfigurationEntity:
    return AgentConfigurationEntity(
        id=row.id,
        team_id=row.team_id,
        ai_agent_id=row.ai_agent_id,
        enabled=row.enabled,
        daily_budget_cap=row.daily_budget_cap,
        monthly_budget_cap=row.monthly_budget_cap,
        daily_spend=row.daily_spend or Decimal("0"),
        current_month_spend=row.current_month_spend or Decimal("0"),
        daily_spend_reset_on=row.daily_spend_reset_on,
        monthly_spend_period=row.monthly_spend_period,
        permissions={flag: bool(getattr(row, flag)) for flag in PERMISSION_FLAGS},
        tool_permissions={k: bool(v) for k, v in (row.tool_permissions or {}).items()},
        auto_approval_threshold=row.auto_approval_threshold,
    )


class AgentConfigurationRepository(BaseRepository[AgentConfiguration]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AgentConfiguration)

    async def get_for_agent(
        self, team_id: str, ai_agent_id: str
    ) -> AgentConfigurationEntity | None:
        result = await self.db.execute(
            select(AgentConfiguration).where(
                AgentConfiguration.team_id == team_id,
                AgentConfiguration.ai_agent_id == ai_agent_id,
            )
        )
        row = result.scalar_one_or_none()
        return _config_entity(row) if row else None

    async def get_for_agent_code(
        self, team_id: str, agent_code: str
    ) -> AgentConfigurationEntity | None:
        result = await self.db.execute(
            select(AgentConfiguration)
            .join(AIAgent, AIAgent.id == AgentConfiguration.ai_agent_id)
            .where(AgentConfiguration.team_id == team_id, AIAgent.code == agent_code)
        )
        row = result.scalar_one_or_none()
        return _config_entity(row) if row else None

    async def debit(self, config_id: str, cost: Decimal, now: datetime) -> None:
        today = utc_today(now)
        period = month_period(now)
        await self.db.execute(
            update(AgentConfiguration)
            .where(AgentConfiguration.id == config_id)
            .values(
                daily_spend=case(
                    (AgentConfiguration.daily_spend_reset_on < today, cost),
                    else_=AgentConfiguration.daily_spend + cost,
                ),
                current_month_spend=case(
                    (AgentConfiguration.monthly_spend_period != period, cost),
                    else_=AgentConfiguration.current_month_spend + cost,
                ),
                daily_spend_reset_on=today,
                monthly_spend_period=period,
            )
            .execution_options(synchronize_session=False)
        )

    async def reset_daily(self, now: datetime) -> int:
        today = utc_today(now)
        result = await self.db.execute(
            update(AgentConfiguration)
            .where(
                or_(
                    AgentConfiguration.daily_spend_reset_on.is_(None),
                    AgentConfiguration.daily_spend_reset_on < today,
                )
            )
            .values(daily_spend=Decimal("0"), daily_spend_reset_on=today)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def reset_monthly(self, now: datetime) -> int:
        period = month_period(now)
        result = await self.db.execute(
            update(AgentConfiguration)
            .where(
                or_(
                    AgentConfiguration.monthly_spend_period.is_(None),
                    AgentConfiguration.monthly_spend_period != period,
                )
            )
            .values(current_month_spend=Decimal("0"), monthly_spend_period=period)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

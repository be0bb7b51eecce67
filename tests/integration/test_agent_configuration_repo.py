"""AgentConfiguration repository integration tests (spend counters). Require Postgres."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import select

from agentflow.infrastructure.persistence.models.agent import AgentConfiguration, AIAgent
from agentflow.infrastructure.persistence.repositories.agent_configuration_repo import (
    AgentConfigurationRepository,
)
from agentflow.shared.utils.ids import generate_cuid

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


async def _seed(db_session, **config_values) -> AgentConfiguration:
    agent = AIAgent(code=f"pm_copilot_{generate_cuid()[:10]}", name="PM Copilot")
    db_session.add(agent)
    await db_session.flush()
    config = AgentConfiguration(
        team_id=f"team-{generate_cuid()[:12]}",
        ai_agent_id=agent.id,
        can_modify_tasks=True,
        **config_values,
    )
    db_session.add(config)
    await db_session.flush()
    return config


async def _reload(db_session, config_id: str) -> AgentConfiguration:
    db_session.expire_all()
    result = await db_session.execute(
        select(AgentConfiguration).where(AgentConfiguration.id == config_id)
    )
    return result.scalar_one()


@pytest.mark.requires_db
async def test_get_for_agent_code_maps_permissions(db_session) -> None:
    """The lookup joins the agent catalogue by code."""
    config = await _seed(db_session, daily_budget_cap=Decimal("5"))
    agent = await db_session.get(AIAgent, config.ai_agent_id)
    repo = AgentConfigurationRepository(db_session)

    found = await repo.get_for_agent_code(config.team_id, agent.code)

    assert found is not None
    assert found.id == config.id
    assert found.permissions["can_modify_tasks"] is True
    assert found.permissions["can_send_emails"] is False
    assert found.daily_budget_cap == Decimal("5")


@pytest.mark.requires_db
async def test_debit_accumulates_within_day(db_session) -> None:
    config = await _seed(
        db_session,
        daily_spend=Decimal("1.5"),
        daily_spend_reset_on=date(2026, 3, 10),
        current_month_spend=Decimal("10"),
        monthly_spend_period="2026-03",
    )
    repo = AgentConfigurationRepository(db_session)

    await repo.debit(config.id, Decimal("0.25"), NOW)

    stored = await _reload(db_session, config.id)
    assert stored.daily_spend == Decimal("1.75")
    assert stored.current_month_spend == Decimal("10.25")


@pytest.mark.requires_db
async def test_debit_rolls_over_stale_counters(db_session) -> None:
    """A debit on a new day (and month) starts the counters from the cost."""
    config = await _seed(
        db_session,
        daily_spend=Decimal("4"),
        daily_spend_reset_on=date(2026, 2, 27),
        current_month_spend=Decimal("30"),
        monthly_spend_period="2026-02",
    )
    repo = AgentConfigurationRepository(db_session)

    await repo.debit(config.id, Decimal("0.5"), NOW)

    stored = await _reload(db_session, config.id)
    assert stored.daily_spend == Decimal("0.5")
    assert stored.current_month_spend == Decimal("0.5")
    assert stored.daily_spend_reset_on == date(2026, 3, 10)
    assert stored.monthly_spend_period == "2026-03"


@pytest.mark.requires_db
async def test_reset_daily_skips_current_counters(db_session) -> None:
    stale = await _seed(
        db_session, daily_spend=Decimal("2"), daily_spend_reset_on=date(2026, 3, 9)
    )
    fresh = await _seed(
        db_session, daily_spend=Decimal("3"), daily_spend_reset_on=date(2026, 3, 10)
    )
    repo = AgentConfigurationRepository(db_session)

    assert await repo.reset_daily(NOW) >= 1

    assert (await _reload(db_session, stale.id)).daily_spend == Decimal("0")
    assert (await _reload(db_session, fresh.id)).daily_spend == Decimal("3")

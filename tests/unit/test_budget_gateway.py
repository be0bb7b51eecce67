"""Unit tests for BudgetGateway: enabled flag, permissions, per-tool overrides and caps."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from agentflow.application.dtos.budget import (
    DENY_DAILY_BUDGET,
    DENY_DISABLED,
    DENY_MONTHLY_BUDGET,
    DENY_PERMISSION,
    Allow,
    Deny,
)
from agentflow.application.services.budget_gateway import BudgetGateway
from tests.fakes import FakeAgentConfigurationRepository, make_config

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)
gateway = BudgetGateway(clock=lambda: NOW)


def test_disabled_agent_is_denied_first() -> None:
    """A disabled configuration is refused even for free context tools."""
    result = gateway.authorize(make_config(enabled=False), "work_order_info", 0)
    assert isinstance(result, Deny)
    assert result.code == DENY_DISABLED


def test_missing_permission_is_denied() -> None:
    """Every permission the tool's category requires must be granted."""
    config = make_config(permissions={"can_modify_tasks": False})
    result = gateway.authorize(config, "create_task", 0, ["can_modify_tasks"])
    assert isinstance(result, Deny)
    assert result.code == DENY_PERMISSION
    assert "can_modify_tasks" in result.reason


def test_tool_override_revokes_despite_permission() -> None:
    """tool_permissions[tool] = False wins over a granted category flag."""
    config = make_config(tool_permissions={"create_task": False})
    result = gateway.authorize(config, "create_task", 0, ["can_modify_tasks"])
    assert isinstance(result, Deny)
    assert result.code == DENY_PERMISSION


def test_tool_override_grants_without_permission() -> None:
    """tool_permissions[tool] = True allows a tool whose flag is missing."""
    config = make_config(permissions={}, tool_permissions={"create_task": True})
    assert gateway.authorize(config, "create_task", 0, ["can_modify_tasks"]).allowed


def test_null_caps_are_unlimited() -> None:
    """No daily or monthly cap means any cost is allowed."""
    result = gateway.authorize(make_config(), "llm_completion", Decimal("1000"))
    assert isinstance(result, Allow)
    assert result.estimated_cost == Decimal("1000")


def test_daily_cap_denies_when_cost_exceeds_remaining() -> None:
    """cost > cap - spend today is refused with the daily code."""
    config = make_config(
        daily_budget_cap=Decimal("5.00"),
        daily_spend=Decimal("4.50"),
        daily_spend_reset_on=date(2026, 3, 10),
    )
    assert gateway.authorize(config, "llm_completion", Decimal("0.50")).allowed
    result = gateway.authorize(config, "llm_completion", Decimal("0.51"))
    assert isinstance(result, Deny)
    assert result.code == DENY_DAILY_BUDGET


def test_monthly_cap_denies_when_cost_exceeds_remaining() -> None:
    """The monthly cap is checked after the daily cap."""
    config = make_config(
        daily_budget_cap=Decimal("100"),
        monthly_budget_cap=Decimal("20"),
        current_month_spend=Decimal("19.99"),
        monthly_spend_period="2026-03",
    )
    result = gateway.authorize(config, "llm_completion", Decimal("0.02"))
    assert isinstance(result, Deny)
    assert result.code == DENY_MONTHLY_BUDGET


def test_stale_counters_count_as_zero() -> None:
    """Spend recorded on an earlier day or month does not count against today's caps."""
    config = make_config(
        daily_budget_cap=Decimal("1"),
        monthly_budget_cap=Decimal("1"),
        daily_spend=Decimal("1"),
        daily_spend_reset_on=date(2026, 3, 9),
        current_month_spend=Decimal("1"),
        monthly_spend_period="2026-02",
    )
    assert gateway.authorize(config, "llm_completion", Decimal("0.75")).allowed


def test_zero_cost_skips_budget_checks() -> None:
    """An exhausted budget still allows free calls."""
    config = make_config(
        daily_budget_cap=Decimal("0"),
        daily_spend_reset_on=date(2026, 3, 10),
    )
    assert gateway.authorize(config, "work_order_info", 0).allowed


async def test_record_spend_debits_repository() -> None:
    """record_spend adds the actual cost to both counters."""
    config = make_config()
    repo = FakeAgentConfigurationRepository([config])
    await BudgetGateway(repo, clock=lambda: NOW).record_spend(config, Decimal("0.25"))
    assert repo.debits == [("cfg1", Decimal("0.25"))]
    assert config.daily_spend == Decimal("0.25")
    assert config.current_month_spend == Decimal("0.25")
    assert config.daily_spend_reset_on == date(2026, 3, 10)


async def test_record_spend_ignores_non_positive_cost() -> None:
    """Zero cost does not touch the repository."""
    repo = FakeAgentConfigurationRepository([make_config()])
    await BudgetGateway(repo).record_spend(make_config(), 0)
    assert repo.debits == []


async def test_record_spend_without_repository_raises() -> None:
    """A positive debit needs a repository."""
    with pytest.raises(RuntimeError):
        await BudgetGateway().record_spend(make_config(), Decimal("1"))

"""API tests for the internal spend-reset route."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from httpx import AsyncClient

from agentflow.api.v1.dependencies import get_reset_agent_spend
from agentflow.application.use_cases.budget import ResetAgentSpend
from agentflow.core.config import get_settings
from tests.fakes import FakeAgentConfigurationRepository, make_config

URL = "/api/v1/internal/agent-spend/reset"


def _reset_use_case() -> ResetAgentSpend:
    repo = FakeAgentConfigurationRepository(
        [
            make_config(
                daily_spend=Decimal("2"),
                daily_spend_reset_on=date(2026, 2, 28),
                current_month_spend=Decimal("9"),
                monthly_spend_period="2026-02",
            )
        ]
    )
    return ResetAgentSpend(repo, clock=lambda: datetime(2026, 3, 1, 0, 5, tzinfo=UTC))


async def test_hidden_without_configured_token(
    client: AsyncClient, override, monkeypatch: pytest.MonkeyPatch
) -> None:
    """With no INTERNAL_API_TOKEN the route does not exist."""
    monkeypatch.delenv("INTERNAL_API_TOKEN", raising=False)
    get_settings.cache_clear()
    override(get_reset_agent_spend, _reset_use_case)
    response = await client.post(URL, headers={"X-Internal-Token": "anything"})
    assert response.status_code == 404


async def test_wrong_token_is_401(client: AsyncClient, override, internal_token) -> None:
    override(get_reset_agent_spend, _reset_use_case)
    response = await client.post(URL, headers={"X-Internal-Token": "wrong"})
    assert response.status_code == 401
    missing = await client.post(URL)
    assert missing.status_code == 401


async def test_reset_on_first_of_month(client: AsyncClient, override, internal_token) -> None:
    """On the 1st both daily and monthly counters are reset."""
    override(get_reset_agent_spend, _reset_use_case)

    response = await client.post(URL, headers={"X-Internal-Token": internal_token})

    assert response.status_code == 200
    assert response.json() == {"success": True, "daily_reset": 1, "monthly_reset": 1}

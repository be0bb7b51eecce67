"""Budget and permission gateway for agent tool calls.

authorize() is a pure check against the configuration snapshot it is
given. It does not reserve budget: callers debit the actual cost after the
tool ran via record_spend(), which is a single atomic UPDATE. Concurrent
calls may therefore overshoot a cap by at most their in-flight costs.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal

from agentflow.application.dtos.budget import (
    DENY_DAILY_BUDGET,
    DENY_DISABLED,
    DENY_MONTHLY_BUDGET,
    DENY_PERMISSION,
    Allow,
    AuthorizationResult,
    Deny,
)
from agentflow.application.interfaces.repositories import IAgentConfigurationRepository
from agentflow.domain.entities.agent_configuration import AgentConfigurationEntity
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class BudgetGateway:
    """Checks permissions and remaining daily/monthly budget; records spend."""

    def __init__(
        self,
        config_repo: IAgentConfigurationRepository | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._config_repo = config_repo
        self._clock = clock

    def authorize(
        self,
        config: AgentConfigurationEntity,
        tool_name: str,
        estimated_cost: Decimal | float | int,
        required_permissions: Iterable[str] = (),
    ) -> AuthorizationResult:
        """Return Allow or Deny(reason, code).

        Order: agent enabled, permissions (a per-tool override wins over the
        flags), then budget. Budget is skipped for non-positive costs; a null
        cap is unlimited; counters from a past day/month count as zero.
        """
        cost = Decimal(str(estimated_cost))
        if not config.enabled:
            return Deny(f"Agent is disabled for team {config.team_id}", DENY_DISABLED)

        override = config.tool_override(tool_name)
        if override is False:
            return Deny(f"Tool '{tool_name}' is disabled for this agent", DENY_PERMISSION)
        if override is None:
            missing = [p for p in required_permissions if not config.has_permission(p)]
            if missing:
                return Deny(
                    f"Tool '{tool_name}' requires permission(s): {', '.join(missing)}",
                    DENY_PERMISSION,
                )

        if cost <= 0:
            return Allow(cost)

        now = self._clock()
        if config.daily_budget_cap is not None:
            remaining = config.daily_budget_cap - config.effective_daily_spend(now)
            if cost > remaining:
                left = max(remaining, Decimal("0"))
                return Deny(
                    f"Daily budget exceeded: {cost} requested, {left} remaining",
                    DENY_DAILY_BUDGET,
                )
        if config.monthly_budget_cap is not None:
            remaining = config.monthly_budget_cap - config.effective_month_spend(now)
            if cost > remaining:
                left = max(remaining, Decimal("0"))
                return Deny(
                    f"Monthly budget exceeded: {cost} requested, {left} remaining",
                    DENY_MONTHLY_BUDGET,
                )
        return Allow(cost)

    async def record_spend(
        self, config: AgentConfigurationEntity, cost: Decimal | float | int
    ) -> None:
        """Debit actual cost atomically; no-op for non-positive cost."""
        amount = Decimal(str(cost))
        if amount <= 0:
            return
        if self._config_repo is None:
            raise RuntimeError("BudgetGateway.record_spend requires a configuration repository")
        now = self._clock()
        await self._config_repo.debit(config.id, amount, now)
        logger.debug("Debited %s from agent configuration %s", amount, config.id)

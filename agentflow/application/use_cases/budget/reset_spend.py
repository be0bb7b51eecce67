"""Scheduled spend reset (run once per day at 00:00 UTC)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from agentflow.application.interfaces.repositories import IAgentConfigurationRepository
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.utils.datetime import is_first_day_of_month, utc_now

logger = get_logger(__name__)


@dataclass(frozen=True)
class SpendResetResult:
    daily_reset: int
    monthly_reset: int


class ResetAgentSpend:
    """Zero stale daily counters; on the first UTC day of a month, monthly ones too.

    Safe to run more than once a day: only counters from an earlier day or
    month are touched.
    """

    def __init__(
        self,
        config_repo: IAgentConfigurationRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._config_repo = config_repo
        self._clock = clock

    async def execute(self) -> SpendResetResult:
        now = self._clock()
        daily = await self._config_repo.reset_daily(now)
        monthly = 0
        if is_first_day_of_month(now):
            monthly = await self._config_repo.reset_monthly(now)
        logger.info(
            "Agent spend reset: %d daily counter(s), %d monthly counter(s)", daily, monthly
        )
        return SpendResetResult(daily_reset=daily, monthly_reset=monthly)

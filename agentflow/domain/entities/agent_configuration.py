"""Agent configuration entity: per-team budget caps, spend counters and permissions."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from agentflow.shared.utils.datetime import month_period, utc_today

PERMISSION_FLAGS = (
    "can_create_work_orders",
    "can_modify_tasks",
    "can_access_client_data",
    "can_send_emails",
    "can_modify_deliverables",
    "can_access_financial_data",
    "can_modify_playbooks",
)


@dataclass
class AgentConfigurationEntity:
    """What one agent may do for one team, and how much it has spent."""

    id: str
    team_id: str
    ai_agent_id: str
    enabled: bool = True
    daily_budget_cap: Decimal | None = None
    monthly_budget_cap: Decimal | None = None
    daily_spend: Decimal = Decimal("0")
    current_month_spend: Decimal = Decimal("0")
    daily_spend_reset_on: date | None = None
    monthly_spend_period: str | None = None
    permissions: dict[str, bool] = field(default_factory=dict)
    tool_permissions: dict[str, bool] = field(default_factory=dict)
    auto_approval_threshold: float | None = None

    def has_permission(self, flag: str) -> bool:
        return bool(self.permissions.get(flag, False))

    def tool_override(self, tool_name: str) -> bool | None:
        """Explicit per-tool grant/revoke, or None when the category decides."""
        value = self.tool_permissions.get(tool_name)
        return None if value is None else bool(value)

    def effective_daily_spend(self, now: datetime) -> Decimal:
        """Daily spend, treating a counter from an earlier UTC day as zero."""
        if self.daily_spend_reset_on is not None and self.daily_spend_reset_on < utc_today(now):
            return Decimal("0")
        return self.daily_spend

    def effective_month_spend(self, now: datetime) -> Decimal:
        """Monthly spend, treating a counter from an earlier month as zero."""
        if self.monthly_spend_period is not None and self.monthly_spend_period != month_period(now):
            return Decimal("0")
        return self.current_month_spend

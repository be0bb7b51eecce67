"""Gateway decision values. Denials are values, not exceptions."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Allow:
    """Tool call may proceed; caller records actual spend afterwards."""

    estimated_cost: Decimal = Decimal("0")

    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    """Tool call refused. code is one of DENY_* below."""

    reason: str
    code: str

    @property
    def allowed(self) -> bool:
        return False


AuthorizationResult = Allow | Deny

DENY_DISABLED = "agent_disabled"
DENY_PERMISSION = "permission_denied"
DENY_DAILY_BUDGET = "daily_budget_exceeded"
DENY_MONTHLY_BUDGET = "monthly_budget_exceeded"

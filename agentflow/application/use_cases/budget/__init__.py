"""Budget maintenance use cases."""

from agentflow.application.use_cases.budget.reset_spend import ResetAgentSpend, SpendResetResult

__all__ = ["ResetAgentSpend", "SpendResetResult"]

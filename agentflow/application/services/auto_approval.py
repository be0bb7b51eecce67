"""Auto-approval policy for PM Copilot suggestions in full mode."""

from __future__ import annotations

from typing import Any

from agentflow.domain.value_objects.conditions import to_decimal

CONFIDENCE_SCORES: dict[str, float] = {
    "high": 0.9,
    "medium": 0.7,
    "low": 0.5,
}


def confidence_score(suggestion: dict[str, Any]) -> float:
    """Explicit confidence_score when numeric, else the mapped confidence level (medium default)."""
    explicit = to_decimal(suggestion.get("confidence_score"))
    if explicit is not None:
        return float(explicit)
    level = str(suggestion.get("confidence") or "medium").lower()
    return CONFIDENCE_SCORES.get(level, CONFIDENCE_SCORES["medium"])


def has_budget_impact(suggestion: dict[str, Any]) -> bool:
    if suggestion.get("has_budget_impact") is True:
        return True
    cost = to_decimal(suggestion.get("budget_cost"))
    return cost is not None and cost > 0


def should_auto_approve(suggestion: dict[str, Any], threshold: float | None) -> bool:
    """True when auto-approval is on, the suggestion has no budget impact and meets threshold."""
    if threshold is None:
        return False
    if suggestion.get("status", "pending") != "pending":
        return False
    if has_budget_impact(suggestion):
        return False
    return confidence_score(suggestion) >= threshold

"""Node results returned by workflow nodes to the runner.

A node returns exactly one of Continue, Pause or Terminate; the runner
merges `updates` into state_data before acting on the variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from agentflow.shared.enums import AIConfidence, Urgency


@dataclass(frozen=True)
class Continue:
    """Advance to the next node."""

    updates: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Pause:
    """Stop at a checkpoint and wait for human approval."""

    checkpoint: str
    reason: str
    approval_title: str
    approval_preview: str | None = None
    confidence: AIConfidence | None = None
    urgency: Urgency = Urgency.NORMAL
    work_order_id: str | None = None
    updates: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Terminate:
    """Finish early with a result."""

    result: dict[str, Any] = field(default_factory=dict)
    updates: dict[str, Any] = field(default_factory=dict)


NodeResult = Continue | Pause | Terminate


@dataclass(frozen=True)
class SuggestionActionResult:
    """Outcome of approving or rejecting one suggestion."""

    workflow_state_id: str
    suggestion_type: str
    suggestion_index: int
    status: str
    created_id: str | None = None


@dataclass(frozen=True)
class PendingSuggestions:
    """Suggestions stored on a workflow state, returned verbatim."""

    workflow_state_id: str
    status: str
    deliverable_suggestions: list[dict[str, Any]]
    task_suggestions: list[dict[str, Any]]

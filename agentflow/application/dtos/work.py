"""DTOs for work records read and written by this service (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from agentflow.shared.utils.datetime import to_iso


def _number(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def tag_names(tags: list[Any]) -> list[str]:
    """Tag names from plain strings or {"name": ...} objects."""
    names: list[str] = []
    for tag in tags or []:
        if isinstance(tag, dict):
            if tag.get("name"):
                names.append(str(tag["name"]))
        elif tag is not None:
            names.append(str(tag))
    return names


@dataclass(frozen=True)
class WorkOrderResult:
    """Work order fields the PM Copilot reads."""

    id: str
    team_id: str
    title: str
    description: str | None
    status: str
    pm_copilot_mode: str
    project_id: str | None = None
    budget_cost: Decimal | None = None
    estimated_hours: Decimal | None = None
    actual_hours: Decimal | None = None
    due_date: datetime | None = None
    acceptance_criteria: list[Any] = field(default_factory=list)
    tags: list[Any] = field(default_factory=list)

    def to_context(self) -> dict[str, Any]:
        """JSON-safe view stored in workflow state_data."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "pm_copilot_mode": self.pm_copilot_mode,
            "project_id": self.project_id,
            "budget_cost": _number(self.budget_cost),
            "estimated_hours": _number(self.estimated_hours),
            "actual_hours": _number(self.actual_hours),
            "due_date": to_iso(self.due_date),
            "acceptance_criteria": list(self.acceptance_criteria or []),
            "tags": tag_names(self.tags),
        }


@dataclass(frozen=True)
class DeliverableResult:
    """Deliverable created from an approved suggestion."""

    id: str
    team_id: str
    work_order_id: str
    title: str
    description: str | None
    deliverable_type: str | None
    status: str

    def to_context(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.deliverable_type,
            "status": self.status,
        }


@dataclass(frozen=True)
class TaskResult:
    """Task created from an approved suggestion."""

    id: str
    team_id: str
    work_order_id: str
    title: str
    description: str | None
    status: str
    estimated_hours: Decimal | None
    position_in_work_order: int
    is_blocked: bool = False
    due_date: datetime | None = None

    def to_context(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "estimated_hours": _number(self.estimated_hours),
            "is_blocked": self.is_blocked,
            "due_date": to_iso(self.due_date),
        }


@dataclass(frozen=True)
class InboxItemResult:
    """Human-action record referencing a workflow state."""

    id: str
    team_id: str
    item_type: str
    title: str
    approvable_type: str | None
    approvable_id: str | None
    content_preview: str | None = None
    urgency: str | None = None
    ai_confidence: str | None = None
    related_work_order_id: str | None = None
    approved_at: datetime | None = None
    rejected_at: datetime | None = None

    @property
    def is_resolved(self) -> bool:
        return self.approved_at is not None or self.rejected_at is not None

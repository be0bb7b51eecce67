"""Workflow state domain entity (persisted checkpoint of a workflow run)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from agentflow.shared.enums import WorkflowStatus

START_NODE = "start"
COMPLETED_NODE = "completed"


@dataclass
class WorkflowStateEntity:
    """Checkpoint of one workflow instance.

    current_node is the last executed (or paused) node; "start" before the
    first node runs and "completed" once the sequence finishes.
    """

    id: str
    team_id: str
    workflow_class: str
    status: WorkflowStatus
    current_node: str
    state_data: dict[str, Any] = field(default_factory=dict)
    ai_agent_id: str | None = None
    agent_trigger_id: str | None = None
    subject_type: str | None = None
    subject_id: str | None = None
    paused_at: datetime | None = None
    pause_reason: str | None = None
    resumed_at: datetime | None = None
    approval_required: bool = False
    completed_at: datetime | None = None
    failed_at: datetime | None = None
    error_message: str | None = None
    created_at: datetime | None = None

    @property
    def is_paused(self) -> bool:
        return self.status == WorkflowStatus.PAUSED and self.paused_at is not None

    @property
    def input(self) -> dict[str, Any]:
        return self.state_data.get("input") or {}

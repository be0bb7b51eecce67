"""Repository interfaces (Protocols) for the application layer.

Implementations live in agentflow.infrastructure.persistence.repositories.
Use cases depend only on these protocols so unit tests can pass fakes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from agentflow.application.dtos.work import (
        DeliverableResult,
        InboxItemResult,
        TaskResult,
        WorkOrderResult,
    )
    from agentflow.domain.entities import (
        AgentConfigurationEntity,
        ChainExecutionEntity,
        EntitySnapshot,
        TriggerEntity,
        WorkflowStateEntity,
    )


class ITriggerRepository(Protocol):
    """Protocol for trigger reads and the atomic last-fired update."""

    async def find_candidates(
        self,
        team_id: str,
        entity_type: str,
        from_status: str | None,
        to_status: str | None,
    ) -> list["TriggerEntity"]:
        """Enabled triggers for team + entity type whose status filters accept the transition.

        Null status_from/status_to are wildcards. Ordered by priority desc,
        then creation order. Chain is loaded on each entity.
        """

    async def get_by_id(self, trigger_id: str, team_id: str) -> "TriggerEntity | None":
        """Return the trigger with its chain, or None."""

    async def mark_fired(
        self, trigger_id: str, now: datetime, window_minutes: float | None
    ) -> bool:
        """Set last_triggered_at = now if the dedup window still allows it.

        Single conditional UPDATE; returns False when a concurrent firing
        already claimed the window.
        """


class IWorkflowStateRepository(Protocol):
    """Protocol for persisted workflow checkpoints."""

    async def create(self, state: "WorkflowStateEntity") -> "WorkflowStateEntity":
        """Insert a new state row."""

    async def save(self, state: "WorkflowStateEntity") -> None:
        """Persist every mutable field of the state (status, node, data, markers)."""

    async def get_by_id(
        self, state_id: str, team_id: str, *, for_update: bool = False
    ) -> "WorkflowStateEntity | None":
        """Return the state; for_update takes a row lock until the transaction ends."""

    async def latest_for_subject(
        self,
        team_id: str,
        workflow_class: str,
        subject_type: str,
        subject_id: str,
        statuses: tuple[str, ...],
    ) -> "WorkflowStateEntity | None":
        """Most recently created state for the subject in one of statuses."""


class IAgentConfigurationRepository(Protocol):
    """Protocol for agent configurations and spend counters."""

    async def get_for_agent(
        self, team_id: str, ai_agent_id: str
    ) -> "AgentConfigurationEntity | None":
        """Configuration of an agent for a team."""

    async def get_for_agent_code(
        self, team_id: str, agent_code: str
    ) -> "AgentConfigurationEntity | None":
        """Configuration looked up by the agent's catalogue code (e.g. pm_copilot)."""

    async def debit(self, config_id: str, cost: Decimal, now: datetime) -> None:
        """Atomically add cost to daily and monthly spend (rolling stale periods over)."""

    async def reset_daily(self, now: datetime) -> int:
        """Zero daily spend for configurations last reset before today; return row count."""

    async def reset_monthly(self, now: datetime) -> int:
        """Zero monthly spend for configurations from an earlier month; return row count."""


class IInboxRepository(Protocol):
    """Protocol for human-action inbox items."""

    async def create(
        self,
        team_id: str,
        *,
        item_type: str,
        source_type: str,
        title: str,
        approvable_type: str,
        approvable_id: str,
        content_preview: str | None = None,
        urgency: str | None = None,
        ai_confidence: str | None = None,
        related_work_order_id: str | None = None,
        source_id: str | None = None,
    ) -> "InboxItemResult":
        """Create an item referencing a workflow state."""

    async def get_by_id(self, item_id: str, team_id: str) -> "InboxItemResult | None":
        """Return the item, or None."""

    async def mark_approved(self, item_id: str, user_id: str | None, now: datetime) -> None:
        """Set approved_at/approved_by."""

    async def mark_rejected(
        self, item_id: str, user_id: str | None, reason: str | None, now: datetime
    ) -> None:
        """Set rejected_at/rejected_by/rejection_reason."""


class IWorkOrderRepository(Protocol):
    """Protocol for work order reads and the agent-settings update."""

    async def get_for_team(self, work_order_id: str, team_id: str) -> "WorkOrderResult | None":
        """Return the work order, or None."""

    async def set_pm_copilot_mode(
        self, work_order_id: str, team_id: str, mode: str
    ) -> "WorkOrderResult | None":
        """Update pm_copilot_mode; None when the work order does not exist."""


class IDeliverableRepository(Protocol):
    """Protocol for deliverables created from suggestions."""

    async def create(
        self,
        team_id: str,
        work_order_id: str,
        title: str,
        *,
        description: str | None = None,
        deliverable_type: str | None = None,
        acceptance_criteria: list[Any] | None = None,
        project_id: str | None = None,
    ) -> "DeliverableResult":
        """Create a draft deliverable."""

    async def list_for_work_order(
        self, work_order_id: str, team_id: str
    ) -> list["DeliverableResult"]:
        """Existing deliverables of the work order."""


class ITaskRepository(Protocol):
    """Protocol for tasks created from suggestions."""

    async def create(
        self,
        team_id: str,
        work_order_id: str,
        title: str,
        *,
        description: str | None = None,
        estimated_hours: Decimal | None = None,
        position_in_work_order: int | None = None,
        checklist_items: list[Any] | None = None,
        deliverable_id: str | None = None,
    ) -> "TaskResult":
        """Create a todo task; position defaults to the end of the work order."""

    async def list_for_work_order(self, work_order_id: str, team_id: str) -> list["TaskResult"]:
        """Existing tasks of the work order, by position."""


class IPlaybookRepository(Protocol):
    """Protocol for team playbooks used as planning context."""

    async def list_relevant(
        self, team_id: str, tags: list[str], limit: int = 5
    ) -> list[dict[str, Any]]:
        """Playbooks sharing a tag with the work order (all team playbooks when no tags)."""


class IChainExecutionRepository(Protocol):
    """Protocol for the per-firing chain execution record."""

    async def record(self, execution: "ChainExecutionEntity") -> "ChainExecutionEntity":
        """Insert one execution row and return it with its timestamps."""

    async def list_for_trigger(
        self, team_id: str, trigger_id: str
    ) -> list["ChainExecutionEntity"]:
        """Executions of one trigger, newest first."""


class IActivityLogRepository(Protocol):
    """Protocol for the agent activity log."""

    async def record(
        self,
        team_id: str,
        agent_configuration_id: str,
        tool_name: str,
        status: str,
        *,
        cost: Decimal = Decimal("0"),
        duration_ms: int = 0,
        input_summary: dict[str, Any] | None = None,
        error: str | None = None,
        workflow_state_id: str | None = None,
    ) -> None:
        """Append one tool-call row."""


class IEntityReader(Protocol):
    """Reads trackable entities as snapshots (work order, task, deliverable)."""

    async def load(
        self,
        team_id: str,
        entity_type: str,
        entity_id: str,
        *,
        from_status: str | None = None,
        to_status: str | None = None,
    ) -> "EntitySnapshot | None":
        """Snapshot of the entity, or None when missing or outside the team."""

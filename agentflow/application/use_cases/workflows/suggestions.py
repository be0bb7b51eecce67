"""Approve or reject individual PM Copilot suggestions.

Suggestions live inside the workflow state's state_data
(`deliverable_suggestions`, `task_suggestions`). Approving one creates a
single Deliverable or Task and marks the suggestion approved; rejecting
marks it rejected. Neither resumes the workflow. The state row is locked
for the duration of the change.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from agentflow.application.dtos.work import WorkOrderResult
from agentflow.application.dtos.workflow import PendingSuggestions, SuggestionActionResult
from agentflow.application.interfaces.repositories import (
    IDeliverableRepository,
    IInboxRepository,
    ITaskRepository,
    IWorkflowStateRepository,
    IWorkOrderRepository,
)
from agentflow.application.use_cases.workflows.approval import load_state_for_item
from agentflow.domain.entities.workflow_state import WorkflowStateEntity
from agentflow.domain.exceptions import (
    ResourceNotFoundException,
    SuggestionAlreadyResolvedException,
    SuggestionNotFoundException,
    ValidationException,
    WorkflowStateException,
)
from agentflow.domain.value_objects.conditions import to_decimal
from agentflow.shared.enums import SuggestionStatus, SuggestionType, WorkflowStatus
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.telemetry.tracing import traced
from agentflow.shared.utils.datetime import to_iso, utc_now

logger = get_logger(__name__)

PM_COPILOT_WORKFLOW = "pm_copilot"

_ACTIONABLE_STATUSES = (WorkflowStatus.PAUSED, WorkflowStatus.COMPLETED)


def suggestions_key(suggestion_type: str) -> str:
    if suggestion_type not in SuggestionType.values():
        raise ValidationException(
            f"suggestion_type must be one of {SuggestionType.values()}",
            field="suggestion_type",
        )
    return f"{suggestion_type}_suggestions"


def deliverable_params(
    work_order_id: str, suggestion: dict[str, Any], project_id: str | None = None
) -> dict[str, Any]:
    """Fields of the Deliverable an approved suggestion becomes."""
    return {
        "work_order_id": work_order_id,
        "title": suggestion.get("title") or "Untitled deliverable",
        "description": suggestion.get("description"),
        "deliverable_type": suggestion.get("type"),
        "acceptance_criteria": list(suggestion.get("acceptance_criteria") or []),
        "project_id": project_id,
    }


def task_params(
    work_order_id: str, suggestion: dict[str, Any], deliverable_id: str | None = None
) -> dict[str, Any]:
    """Fields of the Task an approved suggestion becomes."""
    return {
        "work_order_id": work_order_id,
        "title": suggestion.get("title") or "Untitled task",
        "description": suggestion.get("description"),
        "estimated_hours": to_decimal(suggestion.get("estimated_hours")),
        "position_in_work_order": suggestion.get("position"),
        "checklist_items": list(suggestion.get("checklist_items") or []),
        "deliverable_id": deliverable_id,
    }


def linked_deliverable_id(
    state_data: dict[str, Any], task_suggestion: dict[str, Any]
) -> str | None:
    """Id of the approved deliverable the task suggestion was generated for."""
    title = task_suggestion.get("deliverable_title")
    if not title:
        return None
    for suggestion in state_data.get("deliverable_suggestions") or []:
        if suggestion.get("title") == title and suggestion.get("deliverable_id"):
            return suggestion["deliverable_id"]
    return None


def mark_approved(
    suggestion: dict[str, Any],
    suggestion_type: str,
    created_id: str,
    approved_by: str | None,
    now: datetime,
    *,
    auto: bool = False,
) -> dict[str, Any]:
    marked = {
        **suggestion,
        "status": SuggestionStatus.APPROVED.value,
        f"{suggestion_type}_id": created_id,
        "approved_at": to_iso(now),
        "approved_by": approved_by,
    }
    if auto:
        marked["auto_approved"] = True
    return marked


def mark_rejected(
    suggestion: dict[str, Any],
    rejected_by: str | None,
    reason: str | None,
    now: datetime,
) -> dict[str, Any]:
    return {
        **suggestion,
        "status": SuggestionStatus.REJECTED.value,
        "rejected_at": to_iso(now),
        "rejected_by": rejected_by,
        "rejection_reason": reason,
    }


def work_order_id_of(state: WorkflowStateEntity) -> str | None:
    return state.input.get("work_order_id") or state.subject_id


class SuggestionService:
    """Per-suggestion decisions and the pending-suggestions read."""

    def __init__(
        self,
        inbox_repo: IInboxRepository,
        state_repo: IWorkflowStateRepository,
        work_order_repo: IWorkOrderRepository,
        deliverable_repo: IDeliverableRepository,
        task_repo: ITaskRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._inbox_repo = inbox_repo
        self._state_repo = state_repo
        self._work_order_repo = work_order_repo
        self._deliverable_repo = deliverable_repo
        self._task_repo = task_repo
        self._clock = clock

    async def list_pending(self, team_id: str, work_order_id: str) -> PendingSuggestions:
        """Suggestions of the latest paused (else completed) PM Copilot run."""
        work_order = await self._work_order_repo.get_for_team(work_order_id, team_id)
        if work_order is None:
            raise ResourceNotFoundException("WorkOrder", work_order_id)
        state = None
        for status in _ACTIONABLE_STATUSES:
            state = await self._state_repo.latest_for_subject(
                team_id, PM_COPILOT_WORKFLOW, "work_order", work_order_id, (status.value,)
            )
            if state is not None:
                break
        if state is None:
            raise ResourceNotFoundException("PMCopilotWorkflow", work_order_id)
        return PendingSuggestions(
            workflow_state_id=state.id,
            status=state.status.value,
            deliverable_suggestions=list(state.state_data.get("deliverable_suggestions") or []),
            task_suggestions=list(state.state_data.get("task_suggestions") or []),
        )

    @traced("suggestions.approve")
    async def approve(
        self,
        team_id: str,
        inbox_item_id: str,
        suggestion_type: str,
        suggestion_index: int,
        approver_id: str | None,
    ) -> SuggestionActionResult:
        """Create the Deliverable or Task for one pending suggestion."""
        key = suggestions_key(suggestion_type)
        state, suggestions = await self._load(team_id, inbox_item_id, key, suggestion_type)
        suggestion = self._pending_at(suggestions, suggestion_type, suggestion_index)

        work_order_id = work_order_id_of(state)
        work_order = await self._work_order(team_id, work_order_id)
        if suggestion_type == SuggestionType.DELIVERABLE.value:
            params = deliverable_params(work_order.id, suggestion, work_order.project_id)
            created = await self._deliverable_repo.create(
                team_id,
                params.pop("work_order_id"),
                params.pop("title"),
                **params,
            )
        else:
            params = task_params(
                work_order.id, suggestion, linked_deliverable_id(state.state_data, suggestion)
            )
            created = await self._task_repo.create(
                team_id,
                params.pop("work_order_id"),
                params.pop("title"),
                **params,
            )

        suggestions[suggestion_index] = mark_approved(
            suggestion, suggestion_type, created.id, approver_id, self._clock()
        )
        state.state_data = {**state.state_data, key: suggestions}
        await self._state_repo.save(state)
        logger.info(
            "Approved %s suggestion %d of workflow state %s (created %s)",
            suggestion_type,
            suggestion_index,
            state.id,
            created.id,
        )
        return SuggestionActionResult(
            workflow_state_id=state.id,
            suggestion_type=suggestion_type,
            suggestion_index=suggestion_index,
            status=SuggestionStatus.APPROVED.value,
            created_id=created.id,
        )

    @traced("suggestions.reject")
    async def reject(
        self,
        team_id: str,
        inbox_item_id: str,
        suggestion_type: str,
        suggestion_index: int,
        reason: str | None,
        rejected_by: str | None,
    ) -> SuggestionActionResult:
        """Mark one pending suggestion rejected; nothing else changes."""
        key = suggestions_key(suggestion_type)
        state, suggestions = await self._load(team_id, inbox_item_id, key, suggestion_type)
        suggestion = self._pending_at(suggestions, suggestion_type, suggestion_index)

        suggestions[suggestion_index] = mark_rejected(
            suggestion, rejected_by, reason, self._clock()
        )
        state.state_data = {**state.state_data, key: suggestions}
        await self._state_repo.save(state)
        logger.info(
            "Rejected %s suggestion %d of workflow state %s",
            suggestion_type,
            suggestion_index,
            state.id,
        )
        return SuggestionActionResult(
            workflow_state_id=state.id,
            suggestion_type=suggestion_type,
            suggestion_index=suggestion_index,
            status=SuggestionStatus.REJECTED.value,
        )

    async def _load(
        self, team_id: str, inbox_item_id: str, key: str, suggestion_type: str
    ) -> tuple[WorkflowStateEntity, list[dict[str, Any]]]:
        _, state = await load_state_for_item(
            self._inbox_repo, self._state_repo, team_id, inbox_item_id, for_update=True
        )
        if state.status not in _ACTIONABLE_STATUSES:
            raise WorkflowStateException(
                state.id, state.status.value, f"change {suggestion_type} suggestions of"
            )
        return state, [dict(s) for s in state.state_data.get(key) or []]

    @staticmethod
    def _pending_at(
        suggestions: list[dict[str, Any]], suggestion_type: str, index: int
    ) -> dict[str, Any]:
        if index < 0 or index >= len(suggestions):
            raise SuggestionNotFoundException(suggestion_type, index)
        suggestion = suggestions[index]
        status = suggestion.get("status", SuggestionStatus.PENDING.value)
        if status != SuggestionStatus.PENDING.value:
            raise SuggestionAlreadyResolvedException(suggestion_type, index, status)
        return suggestion

    async def _work_order(self, team_id: str, work_order_id: str | None) -> WorkOrderResult:
        work_order = (
            await self._work_order_repo.get_for_team(work_order_id, team_id)
            if work_order_id
            else None
        )
        if work_order is None:
            raise ResourceNotFoundException("WorkOrder", work_order_id or "")
        return work_order

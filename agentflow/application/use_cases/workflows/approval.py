"""Human approval of paused workflows through inbox items.

ApprovalService creates the approval item when the runner pauses.
InboxDecisionHandler applies a whole-workflow decision: approve resumes,
reject finalizes. Individual suggestions are handled by SuggestionService.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from agentflow.application.dtos.work import InboxItemResult
from agentflow.application.dtos.workflow import Pause
from agentflow.application.interfaces.repositories import (
    IInboxRepository,
    IWorkflowStateRepository,
)
from agentflow.domain.entities.workflow_state import WorkflowStateEntity
from agentflow.domain.exceptions import (
    ResourceNotFoundException,
    ValidationException,
    WorkflowStateException,
)
from agentflow.shared.enums import (
    InboxItemType,
    InboxSourceType,
    WorkflowStatus,
)
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.utils.datetime import to_iso, utc_now

if TYPE_CHECKING:
    from agentflow.application.use_cases.workflows.registry import WorkflowRegistry
    from agentflow.application.use_cases.workflows.state_machine import WorkflowRunner

logger = get_logger(__name__)

APPROVABLE_TYPE = "agent_workflow_state"


class ApprovalService:
    """Creates approval inbox items for paused workflow states."""

    def __init__(
        self,
        inbox_repo: IInboxRepository,
        state_repo: IWorkflowStateRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._inbox_repo = inbox_repo
        self._state_repo = state_repo
        self._clock = clock

    async def request_approval(
        self, state: WorkflowStateEntity, pause: Pause
    ) -> InboxItemResult:
        item = await self._inbox_repo.create(
            state.team_id,
            item_type=InboxItemType.APPROVAL.value,
            source_type=InboxSourceType.AI_AGENT.value,
            source_id=state.ai_agent_id,
            title=pause.approval_title,
            approvable_type=APPROVABLE_TYPE,
            approvable_id=state.id,
            content_preview=pause.approval_preview,
            urgency=pause.urgency.value,
            ai_confidence=pause.confidence.value if pause.confidence else None,
            related_work_order_id=pause.work_order_id or state.subject_id,
        )
        state.state_data = {
            **state.state_data,
            "inbox_item_id": item.id,
            "approval_requested_at": to_iso(self._clock()),
        }
        await self._state_repo.save(state)
        logger.info("Approval item %s created for workflow state %s", item.id, state.id)
        return item


async def load_state_for_item(
    inbox_repo: IInboxRepository,
    state_repo: IWorkflowStateRepository,
    team_id: str,
    item_id: str,
    *,
    for_update: bool = False,
) -> tuple[InboxItemResult, WorkflowStateEntity]:
    """Resolve an inbox item to the workflow state it references."""
    item = await inbox_repo.get_by_id(item_id, team_id)
    if item is None:
        raise ResourceNotFoundException("InboxItem", item_id)
    if item.approvable_type != APPROVABLE_TYPE or not item.approvable_id:
        raise ValidationException(
            f"Inbox item {item_id} does not reference a workflow", field="inbox_item_id"
        )
    state = await state_repo.get_by_id(item.approvable_id, team_id, for_update=for_update)
    if state is None:
        raise ResourceNotFoundException("AgentWorkflowState", item.approvable_id)
    return item, state


class InboxDecisionHandler:
    """Whole-workflow approve/reject from the inbox."""

    def __init__(
        self,
        inbox_repo: IInboxRepository,
        state_repo: IWorkflowStateRepository,
        runner: WorkflowRunner,
        registry: WorkflowRegistry,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._inbox_repo = inbox_repo
        self._state_repo = state_repo
        self._runner = runner
        self._registry = registry
        self._clock = clock

    async def handle_approval(
        self, team_id: str, item_id: str, approver_id: str | None
    ) -> WorkflowStateEntity:
        """Mark the item approved and resume the workflow if it is paused.

        An agent_result item on a completed workflow is only acknowledged.
        """
        item, state = await load_state_for_item(
            self._inbox_repo, self._state_repo, team_id, item_id, for_update=True
        )
        if item.is_resolved:
            raise WorkflowStateException(state.id, state.status.value, "approve resolved item of")
        now = self._clock()

        if state.is_paused:
            definition = self._registry.get(state.workflow_class)
            await self._inbox_repo.mark_approved(item.id, approver_id, now)
            return await self._runner.resume(
                definition,
                state,
                {"approved": True, "approver_id": approver_id, "approved_at": to_iso(now)},
            )

        if (
            item.item_type == InboxItemType.AGENT_RESULT.value
            and state.status == WorkflowStatus.COMPLETED
        ):
            await self._inbox_repo.mark_approved(item.id, approver_id, now)
            return state

        raise WorkflowStateException(state.id, state.status.value, "approve")

    async def handle_rejection(
        self,
        team_id: str,
        item_id: str,
        rejected_by: str | None,
        reason: str | None = None,
    ) -> WorkflowStateEntity:
        """Mark the item rejected; a paused workflow becomes rejected."""
        item, state = await load_state_for_item(
            self._inbox_repo, self._state_repo, team_id, item_id, for_update=True
        )
        if item.is_resolved:
            raise WorkflowStateException(state.id, state.status.value, "reject resolved item of")
        now = self._clock()

        if state.is_paused:
            await self._inbox_repo.mark_rejected(item.id, rejected_by, reason, now)
            return await self._runner.reject(state, rejected_by, reason)

        if (
            item.item_type == InboxItemType.AGENT_RESULT.value
            and state.status == WorkflowStatus.COMPLETED
        ):
            await self._inbox_repo.mark_rejected(item.id, rejected_by, reason, now)
            return state

        raise WorkflowStateException(state.id, state.status.value, "reject")

"""Resumable workflow state machine.

A workflow definition is an ordered sequence of named nodes. The runner
executes the node after `current_node`, merges the node's updates into
state_data, persists, and acts on the returned NodeResult:

    Continue  -> next node
    Pause     -> status paused, paused_at set, approval item created; return
    Terminate -> completed early

Pausing does not hold a coroutine or a thread: everything needed to resume
is `current_node` plus `state_data`, so resume() can run in another process
days later. Each node runs inside a savepoint. A node exception rolls back
that node's writes and marks the state failed; state_data keeps what
earlier nodes produced and the failed node is never retried in place.
"""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Callable
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from agentflow.application.dtos.workflow import Continue, NodeResult, Pause, Terminate
from agentflow.application.interfaces.repositories import IWorkflowStateRepository
from agentflow.application.interfaces.services import SavepointFactory
from agentflow.domain.entities.workflow_state import (
    COMPLETED_NODE,
    START_NODE,
    WorkflowStateEntity,
)
from agentflow.domain.exceptions import WorkflowStateException
from agentflow.shared.enums import WorkflowStatus
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.telemetry.tracing import add_span_attributes, traced
from agentflow.shared.utils.datetime import to_iso, utc_now
from agentflow.shared.utils.ids import generate_cuid

if TYPE_CHECKING:
    from agentflow.application.use_cases.workflows.approval import ApprovalService

logger = get_logger(__name__)

NodeHandler = Callable[[WorkflowStateEntity], Awaitable[NodeResult]]

_RESERVED_NODE_NAMES = frozenset({START_NODE, COMPLETED_NODE})
_MAX_ERROR_LENGTH = 2000


@dataclass(frozen=True)
class WorkflowNode:
    name: str
    handler: NodeHandler


class WorkflowDefinition:
    """Named, ordered node sequence."""

    def __init__(self, key: str, nodes: list[WorkflowNode]) -> None:
        names = [n.name for n in nodes]
        if not nodes:
            raise ValueError(f"Workflow '{key}' has no nodes")
        if len(set(names)) != len(names):
            raise ValueError(f"Workflow '{key}' has duplicate node names: {names}")
        reserved = _RESERVED_NODE_NAMES.intersection(names)
        if reserved:
            raise ValueError(f"Workflow '{key}' uses reserved node name(s): {sorted(reserved)}")
        self.key = key
        self.nodes = tuple(nodes)
        self._index = {name: i for i, name in enumerate(names)}

    def next_after(self, current_node: str) -> WorkflowNode | None:
        """Node to run after current_node; None when the sequence is finished."""
        if current_node == START_NODE:
            return self.nodes[0]
        if current_node == COMPLETED_NODE:
            return None
        if current_node not in self._index:
            raise ValueError(f"Workflow '{self.key}' has no node named '{current_node}'")
        position = self._index[current_node] + 1
        return self.nodes[position] if position < len(self.nodes) else None


class WorkflowRunner:
    """Starts, runs, resumes and rejects workflow states."""

    def __init__(
        self,
        state_repo: IWorkflowStateRepository,
        approval_service: ApprovalService,
        *,
        max_steps: int = 100,
        clock: Callable[[], datetime] = utc_now,
        savepoint: SavepointFactory = nullcontext,
    ) -> None:
        self._state_repo = state_repo
        self._approval = approval_service
        self._max_steps = max_steps
        self._clock = clock
        self._savepoint = savepoint

    @traced("workflow_runner.start")
    async def start(
        self,
        definition: WorkflowDefinition,
        *,
        team_id: str,
        input_data: dict[str, Any],
        ai_agent_id: str | None = None,
        agent_trigger_id: str | None = None,
        subject_type: str | None = None,
        subject_id: str | None = None,
    ) -> WorkflowStateEntity:
        """Create a state at the start node and run until pause or completion."""
        state = WorkflowStateEntity(
            id=generate_cuid(),
            team_id=team_id,
            workflow_class=definition.key,
            status=WorkflowStatus.RUNNING,
            current_node=START_NODE,
            state_data={"input": dict(input_data), "started_at": to_iso(self._clock())},
            ai_agent_id=ai_agent_id,
            agent_trigger_id=agent_trigger_id,
            subject_type=subject_type,
            subject_id=subject_id,
        )
        state = await self._state_repo.create(state)
        logger.info(
            "Workflow %s started (workflow_state_id=%s, team_id=%s)",
            definition.key,
            state.id,
            team_id,
        )
        return await self.run(definition, state)

    @traced("workflow_runner.run")
    async def run(
        self, definition: WorkflowDefinition, state: WorkflowStateEntity
    ) -> WorkflowStateEntity:
        """Execute nodes from current_node onwards. The state must be running."""
        if state.status != WorkflowStatus.RUNNING:
            raise WorkflowStateException(state.id, state.status.value, "run")
        add_span_attributes(workflow_state_id=state.id, workflow_class=definition.key)

        for _ in range(self._max_steps):
            node = definition.next_after(state.current_node)
            if node is None:
                await self._complete(state, state.state_data.get("result") or {})
                return state

            state.current_node = node.name
            await self._state_repo.save(state)
            snapshot = copy.deepcopy(state.state_data)
            try:
                async with self._savepoint():
                    result = await node.handler(state)
            except Exception as e:
                state.state_data = snapshot
                await self._fail(state, e)
                return state

            state.state_data = {**state.state_data, **result.updates}
            match result:
                case Continue():
                    await self._state_repo.save(state)
                case Pause():
                    await self._pause(state, result)
                    return state
                case Terminate(result=final):
                    await self._complete(state, final)
                    return state

        await self._fail(
            state, RuntimeError(f"Workflow exceeded {self._max_steps} steps without finishing")
        )
        return state

    @traced("workflow_runner.resume")
    async def resume(
        self,
        definition: WorkflowDefinition,
        state: WorkflowStateEntity,
        approval_data: dict[str, Any] | None = None,
    ) -> WorkflowStateEntity:
        """Continue a paused state from the node after current_node."""
        if not state.is_paused:
            raise WorkflowStateException(state.id, state.status.value, "resume")
        now = self._clock()
        state.status = WorkflowStatus.RUNNING
        state.paused_at = None
        state.resumed_at = now
        state.approval_required = False
        state.state_data = {
            **state.state_data,
            "approval_data": approval_data or {},
            "resumed_at": to_iso(now),
        }
        await self._state_repo.save(state)
        logger.info("Workflow state %s resumed after %s", state.id, state.current_node)
        return await self.run(definition, state)

    async def reject(
        self,
        state: WorkflowStateEntity,
        rejected_by: str | None,
        reason: str | None = None,
    ) -> WorkflowStateEntity:
        """Finalize a paused state as rejected (terminal)."""
        if not state.is_paused:
            raise WorkflowStateException(state.id, state.status.value, "reject")
        now = self._clock()
        state.status = WorkflowStatus.REJECTED
        state.paused_at = None
        state.approval_required = False
        state.state_data = {
            **state.state_data,
            "rejected": True,
            "rejection_reason": reason,
            "rejected_by": rejected_by,
            "rejected_at": to_iso(now),
        }
        await self._state_repo.save(state)
        logger.info("Workflow state %s rejected at %s", state.id, state.current_node)
        return state

    async def _pause(self, state: WorkflowStateEntity, pause: Pause) -> None:
        state.status = WorkflowStatus.PAUSED
        state.paused_at = self._clock()
        state.pause_reason = pause.reason
        state.approval_required = True
        await self._state_repo.save(state)
        await self._approval.request_approval(state, pause)
        logger.info(
            "Workflow state %s paused at checkpoint %s", state.id, pause.checkpoint
        )

    async def _complete(self, state: WorkflowStateEntity, result: dict[str, Any]) -> None:
        now = self._clock()
        state.status = WorkflowStatus.COMPLETED
        state.current_node = COMPLETED_NODE
        state.completed_at = now
        state.state_data = {**state.state_data, "result": result}
        await self._state_repo.save(state)
        logger.info("Workflow state %s completed", state.id)

    async def _fail(self, state: WorkflowStateEntity, error: Exception) -> None:
        logger.exception(
            "Workflow state %s failed at node %s (team_id=%s)",
            state.id,
            state.current_node,
            state.team_id,
            exc_info=error,
        )
        state.status = WorkflowStatus.FAILED
        state.failed_at = self._clock()
        state.error_message = f"{type(error).__name__}: {error}"[:_MAX_ERROR_LENGTH]
        await self._state_repo.save(state)

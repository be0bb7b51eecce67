"""Worker-side handling of a ChainTriggerJob: start the chain's workflow.

The trigger and chain are re-read because either may have been disabled
or deleted since dispatch. Configuration problems (missing chain, unknown
workflow key, missing entity) are logged and dropped; infrastructure
errors propagate so the worker can retry the job. Every job that finds its
trigger leaves one chain execution row: started (pointing at the workflow
state) or dropped (with the reason).
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from agentflow.application.dtos.trigger import ChainTriggerJob
from agentflow.application.interfaces.repositories import (
    IChainExecutionRepository,
    IEntityReader,
    ITriggerRepository,
    IWorkOrderRepository,
)
from agentflow.application.use_cases.workflows.registry import WorkflowRegistry
from agentflow.application.use_cases.workflows.state_machine import WorkflowRunner
from agentflow.domain.entities.entity_snapshot import MISSING, EntitySnapshot
from agentflow.domain.entities.trigger import ChainExecutionEntity, TriggerEntity
from agentflow.domain.entities.workflow_state import WorkflowStateEntity
from agentflow.domain.exceptions import WorkflowNotRegisteredException
from agentflow.shared.enums import ChainExecutionStatus, EntityType, PMCopilotMode
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.telemetry.tracing import add_span_attributes, traced
from agentflow.shared.utils.datetime import utc_now
from agentflow.shared.utils.ids import generate_cuid

logger = get_logger(__name__)


def work_order_id_for(entity: EntitySnapshot) -> str | None:
    """The entity's own id for a work order, else its work_order_id field."""
    if entity.entity_type == EntityType.WORK_ORDER:
        return entity.id
    value = entity.value_of("work_order_id")
    return None if value is MISSING or value is None else str(value)


class ChainTriggerProcessor:
    def __init__(
        self,
        trigger_repo: ITriggerRepository,
        entity_reader: IEntityReader,
        work_order_repo: IWorkOrderRepository,
        runner: WorkflowRunner,
        registry: WorkflowRegistry,
        execution_repo: IChainExecutionRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._trigger_repo = trigger_repo
        self._entity_reader = entity_reader
        self._work_order_repo = work_order_repo
        self._runner = runner
        self._registry = registry
        self._execution_repo = execution_repo
        self._clock = clock

    @traced("chain_trigger.process")
    async def process(self, job: ChainTriggerJob) -> WorkflowStateEntity | None:
        """Start the workflow for the job; None when the job is dropped."""
        add_span_attributes(trigger_id=job.trigger_id, team_id=job.team_id, attempt=job.attempt)
        trigger = await self._trigger_repo.get_by_id(job.trigger_id, job.team_id)
        if trigger is None:
            logger.warning("Chain job dropped: trigger %s no longer exists", job.trigger_id)
            return None
        if not trigger.enabled or not trigger.chain_enabled:
            logger.info(
                "Chain job dropped: trigger %s or its chain is disabled or missing", trigger.id
            )
            await self._record(job, trigger, reason="trigger or chain disabled or missing")
            return None

        try:
            definition = self._registry.get(trigger.chain.workflow_key)
        except WorkflowNotRegisteredException:
            logger.error(
                "Chain %s references unknown workflow '%s'; job for trigger %s dropped",
                trigger.chain.id,
                trigger.chain.workflow_key,
                trigger.id,
            )
            await self._record(
                job, trigger, reason=f"unknown workflow '{trigger.chain.workflow_key}'"
            )
            return None

        entity = await self._entity_reader.load(
            job.team_id,
            job.entity_type,
            job.entity_id,
            from_status=job.from_status,
            to_status=job.to_status,
        )
        if entity is None:
            logger.warning(
                "Chain job dropped: %s %s no longer exists", job.entity_type, job.entity_id
            )
            await self._record(job, trigger, reason=f"{job.entity_type} not found")
            return None

        work_order_id = work_order_id_for(entity)
        mode = PMCopilotMode.FULL.value
        if work_order_id:
            work_order = await self._work_order_repo.get_for_team(work_order_id, job.team_id)
            if work_order is not None:
                mode = work_order.pm_copilot_mode

        state = await self._runner.start(
            definition,
            team_id=job.team_id,
            input_data={
                "work_order_id": work_order_id,
                "team_id": job.team_id,
                "pm_copilot_mode": mode,
                "trigger": {
                    "id": trigger.id,
                    "name": trigger.name,
                    "entity_type": trigger.entity_type,
                    "status_from": trigger.status_from,
                    "status_to": trigger.status_to,
                },
                "entity": entity.to_payload(),
                "triggered_by": {"user_id": job.acting_user_id},
            },
            ai_agent_id=trigger.chain.ai_agent_id,
            agent_trigger_id=trigger.id,
            subject_type=EntityType.WORK_ORDER.value if work_order_id else None,
            subject_id=work_order_id,
        )
        await self._record(job, trigger, state=state)
        return state

    async def _record(
        self,
        job: ChainTriggerJob,
        trigger: TriggerEntity,
        *,
        state: WorkflowStateEntity | None = None,
        reason: str | None = None,
    ) -> None:
        chain = trigger.chain
        execution = await self._execution_repo.record(
            ChainExecutionEntity(
                id=generate_cuid(),
                team_id=job.team_id,
                agent_trigger_id=trigger.id,
                agent_chain_id=chain.id if chain else None,
                status=ChainExecutionStatus.STARTED if state else ChainExecutionStatus.DROPPED,
                workflow_key=chain.workflow_key if chain else None,
                workflow_state_id=state.id if state else None,
                triggerable_type=job.entity_type,
                triggerable_id=job.entity_id,
                attempt=job.attempt,
                reason=reason,
                started_at=self._clock(),
            )
        )
        logger.info(
            "Chain execution %s %s for trigger %s (workflow_state_id=%s)",
            execution.id,
            execution.status.value,
            trigger.id,
            execution.workflow_state_id,
        )

"""Dispatch pipeline: record each firing, then enqueue its chain job.

Triggers are handled independently in priority order. A failure on one
(database or queue) is logged and reported; the rest still dispatch.
last_triggered_at is written before enqueueing and is never rolled back
by a later job failure.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from agentflow.application.dtos.trigger import ChainTriggerJob, DispatchReport
from agentflow.application.interfaces.repositories import ITriggerRepository
from agentflow.application.interfaces.services import IJobQueue
from agentflow.domain.entities.entity_snapshot import EntitySnapshot
from agentflow.domain.entities.trigger import TriggerEntity
from agentflow.shared.context import get_correlation_id
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.telemetry.tracing import add_span_event, traced
from agentflow.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class DispatchPipeline:
    """Marks triggers fired (atomic compare-and-set) and enqueues ChainTriggerJobs."""

    def __init__(
        self,
        trigger_repo: ITriggerRepository,
        queue: IJobQueue,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._trigger_repo = trigger_repo
        self._queue = queue
        self._clock = clock

    @traced("dispatch_pipeline.dispatch")
    async def dispatch(
        self,
        triggers: list[TriggerEntity],
        entity: EntitySnapshot,
        acting_user_id: str | None,
    ) -> DispatchReport:
        """Dispatch each trigger; returns which were dispatched, suppressed or failed."""
        report = DispatchReport()
        for trigger in triggers:
            try:
                claimed = await self._trigger_repo.mark_fired(
                    trigger.id, self._clock(), trigger.dedup_window_minutes
                )
                if not claimed:
                    logger.info(
                        "Trigger %s lost the dedup race; not dispatched", trigger.id
                    )
                    add_span_event("trigger.suppressed", {"trigger_id": trigger.id})
                    report.suppressed.append(trigger.id)
                    continue
                job = ChainTriggerJob(
                    trigger_id=trigger.id,
                    team_id=trigger.team_id,
                    entity_type=entity.entity_type.value,
                    entity_id=entity.id,
                    acting_user_id=acting_user_id,
                    from_status=entity.from_status,
                    to_status=entity.to_status,
                    correlation_id=get_correlation_id(),
                )
                await self._queue.enqueue(job)
                report.dispatched.append(trigger.id)
                logger.info(
                    "Trigger %s dispatched for %s %s (priority=%d)",
                    trigger.id,
                    entity.entity_type.value,
                    entity.id,
                    trigger.priority,
                )
            except Exception:
                logger.exception(
                    "Dispatch failed for trigger %s (team_id=%s, entity_id=%s)",
                    trigger.id,
                    trigger.team_id,
                    entity.id,
                )
                report.failed.append(trigger.id)
        return report

"""Entry point for domain status-change notifications."""

from __future__ import annotations

from agentflow.application.dtos.trigger import DispatchReport, StatusChange
from agentflow.application.interfaces.repositories import IEntityReader
from agentflow.application.use_cases.triggers.dispatch_pipeline import DispatchPipeline
from agentflow.application.use_cases.triggers.trigger_matcher import TriggerMatcher
from agentflow.domain.exceptions import ResourceNotFoundException, ValidationException
from agentflow.shared.enums import EntityType
from agentflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class StatusChangeHandler:
    """Snapshot the entity, find matching triggers, dispatch them."""

    def __init__(
        self,
        entity_reader: IEntityReader,
        matcher: TriggerMatcher,
        pipeline: DispatchPipeline,
    ) -> None:
        self._entity_reader = entity_reader
        self._matcher = matcher
        self._pipeline = pipeline

    async def handle(self, change: StatusChange) -> DispatchReport:
        """Process one transition. Unchanged status is a no-op."""
        if change.entity_type not in EntityType.values():
            raise ValidationException(
                f"entity_type must be one of {EntityType.values()}", field="entity_type"
            )
        if change.from_status == change.to_status:
            return DispatchReport()
        entity = await self._entity_reader.load(
            change.team_id,
            change.entity_type,
            change.entity_id,
            from_status=change.from_status,
            to_status=change.to_status,
        )
        if entity is None:
            raise ResourceNotFoundException(change.entity_type, change.entity_id)
        triggers = await self._matcher.find_matching(
            change.team_id,
            change.entity_type,
            change.from_status,
            change.to_status,
            entity,
        )
        if not triggers:
            return DispatchReport()
        report = await self._pipeline.dispatch(triggers, entity, change.acting_user_id)
        logger.info(
            "Status change %s %s %s->%s: dispatched=%d suppressed=%d failed=%d",
            change.entity_type,
            change.entity_id,
            change.from_status,
            change.to_status,
            len(report.dispatched),
            len(report.suppressed),
            len(report.failed),
        )
        return report

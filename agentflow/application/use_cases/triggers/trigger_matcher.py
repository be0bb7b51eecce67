"""Trigger matcher: which triggers should fire for a status transition (read-only)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from agentflow.application.interfaces.repositories import ITriggerRepository
from agentflow.application.services.condition_evaluator import ConditionEvaluator
from agentflow.application.services.deduplication_gate import DeduplicationGate
from agentflow.domain.entities.entity_snapshot import EntitySnapshot
from agentflow.domain.entities.trigger import TriggerEntity
from agentflow.domain.value_objects.conditions import ignored_keys, unsupported_keys
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.telemetry.tracing import add_span_attributes, traced
from agentflow.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class TriggerMatcher:
    """Structural query in the repository, then chain/condition/dedup filters in memory."""

    def __init__(
        self,
        trigger_repo: ITriggerRepository,
        evaluator: ConditionEvaluator | None = None,
        dedup_gate: DeduplicationGate | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._trigger_repo = trigger_repo
        self._evaluator = evaluator or ConditionEvaluator()
        self._dedup_gate = dedup_gate or DeduplicationGate()
        self._clock = clock

    @traced("trigger_matcher.find_matching")
    async def find_matching(
        self,
        team_id: str,
        entity_type: str,
        from_status: str | None,
        to_status: str | None,
        entity: EntitySnapshot,
    ) -> list[TriggerEntity]:
        """Return matching triggers ordered by priority desc, then creation order."""
        candidates = await self._trigger_repo.find_candidates(
            team_id, entity_type, from_status, to_status
        )
        now = self._clock()
        matched: list[TriggerEntity] = []
        for trigger in candidates:
            if not trigger.enabled or not trigger.matches_transition(from_status, to_status):
                continue
            if not trigger.chain_enabled:
                logger.info(
                    "Trigger %s skipped: chain missing or disabled (team_id=%s)",
                    trigger.id,
                    team_id,
                )
                continue
            bad_keys = unsupported_keys(trigger.conditions)
            if bad_keys:
                logger.warning(
                    "Trigger %s has malformed condition(s) %s; failing closed",
                    trigger.id,
                    bad_keys,
                )
                continue
            skipped_keys = ignored_keys(trigger.conditions)
            if skipped_keys:
                logger.warning(
                    "Trigger %s has unrecognised condition key(s) %s; ignoring them",
                    trigger.id,
                    skipped_keys,
                )
            if not self._evaluator.evaluate(trigger.conditions, entity):
                logger.debug(
                    "Trigger %s conditions not met for %s %s", trigger.id, entity_type, entity.id
                )
                continue
            if not self._dedup_gate.allows(trigger, now):
                logger.info(
                    "Trigger %s suppressed by dedup window (last_triggered_at=%s)",
                    trigger.id,
                    trigger.last_triggered_at,
                )
                continue
            matched.append(trigger)
        # Repository already orders; re-sort stably so fakes and callers get the same guarantee.
        matched.sort(key=lambda t: -t.priority)
        add_span_attributes(candidates=len(candidates), matched=len(matched))
        return matched

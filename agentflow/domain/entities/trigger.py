"""Trigger and chain domain entities.

A trigger maps an entity status transition (plus optional conditions) to
a chain; the chain names the workflow definition that runs. Each firing the
worker picks up is recorded as a chain execution.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from functools import cached_property
from typing import Any

from agentflow.domain.value_objects.conditions import AllOf, parse_conditions, to_decimal
from agentflow.shared.enums import ChainExecutionStatus


@dataclass
class ChainEntity:
    """Target workflow of a trigger."""

    id: str
    team_id: str
    name: str
    workflow_key: str
    enabled: bool
    ai_agent_id: str | None = None


@dataclass
class TriggerEntity:
    """Persisted trigger rule."""

    id: str
    team_id: str
    name: str
    entity_type: str
    status_from: str | None
    status_to: str | None
    priority: int
    enabled: bool
    trigger_conditions: dict[str, Any] | None
    last_triggered_at: datetime | None
    chain: ChainEntity | None
    created_at: datetime | None = None

    @cached_property
    def conditions(self) -> AllOf:
        """Parsed condition AST (parsed once per entity instance)."""
        return parse_conditions(self.trigger_conditions)

    @property
    def dedup_window_minutes(self) -> float | None:
        """Configured dedup window in minutes; None when absent or not a positive number."""
        if not isinstance(self.trigger_conditions, Mapping):
            return None
        raw = self.trigger_conditions.get("deduplication_window_minutes")
        number = to_decimal(raw)
        if number is None or number <= 0:
            return None
        return float(number)

    @property
    def chain_enabled(self) -> bool:
        return self.chain is not None and self.chain.enabled

    def matches_transition(self, from_status: str | None, to_status: str | None) -> bool:
        """Null status_from/status_to act as wildcards; both filters apply."""
        if self.status_from is not None and self.status_from != from_status:
            return False
        if self.status_to is not None and self.status_to != to_status:
            return False
        return True


@dataclass
class ChainExecutionEntity:
    """One trigger firing handed to its chain.

    A started execution points at the workflow state that carries the run;
    progress after that lives on the state. A dropped one keeps the reason.
    """

    id: str
    team_id: str
    agent_trigger_id: str
    agent_chain_id: str | None
    status: ChainExecutionStatus
    workflow_key: str | None = None
    workflow_state_id: str | None = None
    triggerable_type: str | None = None
    triggerable_id: str | None = None
    attempt: int = 1
    reason: str | None = None
    started_at: datetime | None = None

"""DTOs for trigger dispatch (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class ChainTriggerJob:
    """Queued unit of work for one fired trigger.

    Carries ids only; the worker re-fetches trigger, chain and entity at
    execution time so it never runs on stale data.
    """

    trigger_id: str
    team_id: str
    entity_type: str
    entity_id: str
    acting_user_id: str | None
    from_status: str | None = None
    to_status: str | None = None
    correlation_id: str | None = None
    attempt: int = 1

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the queue payload."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChainTriggerJob:
        """Deserialize a queue payload; unknown keys are ignored."""
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)

    def next_attempt(self) -> ChainTriggerJob:
        """Copy of this job with attempt incremented (for retry)."""
        return ChainTriggerJob(**{**self.to_dict(), "attempt": self.attempt + 1})


@dataclass
class DispatchReport:
    """Per-trigger outcome of one dispatch call."""

    dispatched: list[str] = field(default_factory=list)
    suppressed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StatusChange:
    """Domain status-change notification from the CRUD layer."""

    team_id: str
    entity_type: str
    entity_id: str
    from_status: str | None
    to_status: str | None
    acting_user_id: str | None = None

"""Entity snapshot: immutable read of a trackable entity at a status transition.

Every trackable entity type (work order, task, deliverable) is exposed to
the trigger pipeline through the HasTeamId / HasStatusField capabilities,
so matching never branches on the concrete entity class.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from agentflow.shared.enums import EntityType

MISSING: Any = object()


@runtime_checkable
class HasTeamId(Protocol):
    """Anything owned by a team."""

    @property
    def team_id(self) -> str: ...


@runtime_checkable
class HasStatusField(Protocol):
    """Anything with a tracked status and readable fields."""

    @property
    def status(self) -> str | None: ...

    def value_of(self, name: str) -> Any: ...


@dataclass(frozen=True)
class EntitySnapshot:
    """Field values of one entity plus the transition that produced the event."""

    entity_type: EntityType
    id: str
    team_id: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    from_status: str | None = None
    to_status: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def status(self) -> str | None:
        value = self.fields.get("status", self.to_status)
        return str(value) if value is not None else None

    def value_of(self, name: str) -> Any:
        """Return a field value or MISSING. Dotted names walk nested maps."""
        current: Any = self.fields
        for part in name.split("."):
            if not isinstance(current, Mapping) or part not in current:
                return MISSING
            current = current[part]
        return current

    @property
    def tags(self) -> frozenset[str]:
        """Tag names; accepts ["a", "b"] or [{"name": "a"}, ...] field shapes."""
        raw = self.fields.get("tags")
        if not isinstance(raw, (list, tuple)):
            return frozenset()
        names: set[str] = set()
        for item in raw:
            if isinstance(item, str):
                names.add(item)
            elif isinstance(item, Mapping) and isinstance(item.get("name"), str):
                names.add(item["name"])
        return frozenset(names)

    def to_payload(self) -> dict[str, Any]:
        """JSON-friendly form stored in the workflow input."""
        return {
            "type": self.entity_type.value,
            "id": self.id,
            "attributes": {k: v for k, v in self.fields.items()},
        }

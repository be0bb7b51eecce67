"""Trigger condition AST.

Stored trigger_conditions maps are parsed once into these immutable nodes;
evaluation pattern-matches on the node type and never re-reads raw keys.

Stored form (all keys optional, combined with AND):

    {
        "entity_field_equals": {"priority": "high"},
        "budget_greater_than": 1000,
        "budget_at_most": 5000,
        "field_at_least": {"estimated_hours": 8},
        "has_tags": ["urgent"],
        "all_of": [{...}, {...}],
        "deduplication_window_minutes": 60,   # metadata, not a condition
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

# Keys consumed by the dispatch pipeline, never by the evaluator.
METADATA_KEYS = frozenset({"deduplication_window_minutes"})

# Entity fields consulted by budget_* conditions, in fallback order.
BUDGET_FIELDS = ("budget_cost", "budget")


class ComparisonOp(str, Enum):
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="


@dataclass(frozen=True)
class FieldEquals:
    """Entity field equals a literal value."""

    field: str
    value: Any


@dataclass(frozen=True)
class Threshold:
    """Numeric comparison against the first present field in fields."""

    fields: tuple[str, ...]
    op: ComparisonOp
    value: Decimal


@dataclass(frozen=True)
class HasTags:
    """Entity carries every listed tag."""

    tags: tuple[str, ...]


@dataclass(frozen=True)
class AllOf:
    """Conjunction; an empty AllOf is true."""

    conditions: tuple[Condition, ...]


@dataclass(frozen=True)
class Ignored:
    """Unrecognised key. Always evaluates true."""

    key: str


@dataclass(frozen=True)
class Unsupported:
    """Malformed operand of a known key. Always evaluates false."""

    key: str
    reason: str


Condition = FieldEquals | Threshold | HasTags | AllOf | Ignored | Unsupported

_BUDGET_KEYS: dict[str, ComparisonOp] = {
    "budget_greater_than": ComparisonOp.GT,
    "budget_less_than": ComparisonOp.LT,
    "budget_at_least": ComparisonOp.GTE,
    "budget_at_most": ComparisonOp.LTE,
}

_FIELD_THRESHOLD_KEYS: dict[str, ComparisonOp] = {
    "field_greater_than": ComparisonOp.GT,
    "field_less_than": ComparisonOp.LT,
    "field_at_least": ComparisonOp.GTE,
    "field_at_most": ComparisonOp.LTE,
}


def to_decimal(value: Any) -> Decimal | None:
    """Coerce int/float/Decimal/numeric str to Decimal; None otherwise (bools included)."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return None
        return result if result.is_finite() else None
    return None


def _parse_threshold(key: str, fields: tuple[str, ...], op: ComparisonOp, raw: Any) -> Condition:
    number = to_decimal(raw)
    if number is None:
        return Unsupported(key, f"non-numeric operand {raw!r}")
    return Threshold(fields, op, number)


def _parse_entry(key: str, raw: Any) -> Condition:
    if key in _BUDGET_KEYS:
        return _parse_threshold(key, BUDGET_FIELDS, _BUDGET_KEYS[key], raw)

    if key in _FIELD_THRESHOLD_KEYS:
        if not isinstance(raw, Mapping) or not raw:
            return Unsupported(key, "expected a non-empty {field: number} map")
        return AllOf(
            tuple(
                _parse_threshold(key, (str(field),), _FIELD_THRESHOLD_KEYS[key], operand)
                for field, operand in raw.items()
            )
        )

    if key == "entity_field_equals":
        if not isinstance(raw, Mapping):
            return Unsupported(key, "expected a {field: value} map")
        return AllOf(tuple(FieldEquals(str(field), value) for field, value in raw.items()))

    if key == "has_tags":
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, (list, tuple)) or not all(isinstance(t, str) for t in raw):
            return Unsupported(key, "expected a tag or a list of tags")
        return HasTags(tuple(raw))

    if key == "all_of":
        if not isinstance(raw, (list, tuple)) or not all(isinstance(c, Mapping) for c in raw):
            return Unsupported(key, "expected a list of condition maps")
        return AllOf(tuple(parse_conditions(child) for child in raw))

    return Ignored(key)


def parse_conditions(raw: Any) -> AllOf:
    """Parse a stored trigger_conditions map into an AllOf node.

    Metadata keys are dropped and unknown keys become Ignored nodes. Never
    raises: malformed operands become Unsupported nodes so the trigger fails
    closed. Anything that is not a map parses as no conditions.
    """
    if not isinstance(raw, Mapping) or not raw:
        return AllOf(())
    return AllOf(
        tuple(
            _parse_entry(str(key), value)
            for key, value in raw.items()
            if key not in METADATA_KEYS
        )
    )


def unsupported_keys(condition: Condition) -> list[str]:
    """Return keys of every Unsupported node (for configuration warnings)."""
    match condition:
        case Unsupported(key=key):
            return [key]
        case AllOf(conditions=children):
            return [k for child in children for k in unsupported_keys(child)]
        case _:
            return []


def ignored_keys(condition: Condition) -> list[str]:
    """Return keys of every Ignored node."""
    match condition:
        case Ignored(key=key):
            return [key]
        case AllOf(conditions=children):
            return [k for child in children for k in ignored_keys(child)]
        case _:
            return []

"""Trigger condition evaluator: pure evaluation of the condition AST against a snapshot."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from agentflow.domain.entities.entity_snapshot import MISSING, EntitySnapshot
from agentflow.domain.value_objects.conditions import (
    AllOf,
    ComparisonOp,
    Condition,
    FieldEquals,
    HasTags,
    Ignored,
    Threshold,
    Unsupported,
    parse_conditions,
    to_decimal,
)


class ConditionEvaluator:
    """Evaluates parsed conditions. Never raises; missing data means no match."""

    def evaluate(
        self,
        conditions: Condition | Mapping[str, Any] | None,
        entity: EntitySnapshot,
    ) -> bool:
        """Return True when every condition holds for the entity.

        Accepts a parsed Condition or a raw stored map (parsed on the fly).
        An empty map is always true.
        """
        if conditions is None or isinstance(conditions, Mapping):
            conditions = parse_conditions(conditions)
        return self._eval(conditions, entity)

    def _eval(self, condition: Condition, entity: EntitySnapshot) -> bool:
        match condition:
            case AllOf(conditions=children):
                return all(self._eval(child, entity) for child in children)
            case FieldEquals(field=name, value=expected):
                actual = entity.value_of(name)
                return actual is not MISSING and _equals(actual, expected)
            case Threshold(fields=names, op=op, value=limit):
                actual = _first_present(entity, names)
                number = to_decimal(actual)
                return number is not None and _compare(number, op, limit)
            case HasTags(tags=tags):
                return set(tags).issubset(entity.tags)
            case Ignored():
                return True
            case Unsupported():
                return False
        return False


def _first_present(entity: EntitySnapshot, names: tuple[str, ...]) -> Any:
    for name in names:
        value = entity.value_of(name)
        if value is not MISSING and value is not None:
            return value
    return MISSING


def _equals(actual: Any, expected: Any) -> bool:
    if actual == expected:
        return True
    # Enum-like values stored as their string form.
    value = getattr(actual, "value", MISSING)
    return value is not MISSING and value == expected


def _compare(number: Any, op: ComparisonOp, limit: Any) -> bool:
    match op:
        case ComparisonOp.GT:
            return number > limit
        case ComparisonOp.LT:
            return number < limit
        case ComparisonOp.GTE:
            return number >= limit
        case ComparisonOp.LTE:
            return number <= limit
    return False

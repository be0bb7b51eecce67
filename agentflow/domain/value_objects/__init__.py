"""Domain value objects."""

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
)

__all__ = [
    "AllOf",
    "ComparisonOp",
    "Condition",
    "FieldEquals",
    "HasTags",
    "Ignored",
    "Threshold",
    "Unsupported",
    "parse_conditions",
]

"""Unit tests for trigger condition parsing and ConditionEvaluator.

Evaluation is pure: no repositories, no clock. Missing data and malformed
operands never match; unrecognised keys are ignored.
"""

from decimal import Decimal

from agentflow.application.services.condition_evaluator import ConditionEvaluator
from agentflow.domain.value_objects.conditions import (
    AllOf,
    HasTags,
    Unsupported,
    ignored_keys,
    parse_conditions,
    to_decimal,
    unsupported_keys,
)
from tests.fakes import make_snapshot

evaluator = ConditionEvaluator()


def test_empty_conditions_always_match() -> None:
    """None and {} are both true for any entity."""
    entity = make_snapshot({"priority": "low"})
    assert evaluator.evaluate(None, entity) is True
    assert evaluator.evaluate({}, entity) is True


def test_entity_field_equals_matches_and_mismatches() -> None:
    """entity_field_equals compares each listed field with its literal."""
    entity = make_snapshot({"priority": "high", "billable": True})
    assert evaluator.evaluate({"entity_field_equals": {"priority": "high"}}, entity)
    assert not evaluator.evaluate({"entity_field_equals": {"priority": "low"}}, entity)
    assert evaluator.evaluate(
        {"entity_field_equals": {"priority": "high", "billable": True}}, entity
    )


def test_entity_field_equals_missing_field_does_not_match() -> None:
    """A field absent from the entity is never equal, not even to None."""
    entity = make_snapshot({"priority": "high"})
    assert not evaluator.evaluate({"entity_field_equals": {"client_id": None}}, entity)


def test_entity_field_equals_walks_dotted_names() -> None:
    """Dotted names read nested maps."""
    entity = make_snapshot({"client": {"tier": "gold"}})
    assert evaluator.evaluate({"entity_field_equals": {"client.tier": "gold"}}, entity)
    assert not evaluator.evaluate({"entity_field_equals": {"client.region": "eu"}}, entity)


def test_budget_thresholds_use_budget_cost_then_budget() -> None:
    """budget_* conditions read budget_cost, falling back to budget."""
    with_cost = make_snapshot({"budget_cost": "1500.00"})
    with_budget = make_snapshot({"budget": 800})
    assert evaluator.evaluate({"budget_greater_than": 1000}, with_cost)
    assert not evaluator.evaluate({"budget_greater_than": 1000}, with_budget)
    assert evaluator.evaluate({"budget_less_than": 1000}, with_budget)
    assert evaluator.evaluate({"budget_at_least": 1500}, with_cost)
    assert evaluator.evaluate({"budget_at_most": 800}, with_budget)


def test_budget_condition_without_budget_field_does_not_match() -> None:
    """No budget field (or a null one) fails the comparison instead of raising."""
    assert not evaluator.evaluate({"budget_greater_than": 0}, make_snapshot({}))
    assert not evaluator.evaluate({"budget_less_than": 10}, make_snapshot({"budget_cost": None}))


def test_non_numeric_field_value_does_not_match() -> None:
    """Text that is not a number compares false."""
    entity = make_snapshot({"budget_cost": "a lot"})
    assert not evaluator.evaluate({"budget_greater_than": 1}, entity)


def test_field_thresholds_apply_to_every_listed_field() -> None:
    """field_at_least with several fields requires all of them."""
    entity = make_snapshot({"estimated_hours": 10, "actual_hours": 2})
    assert evaluator.evaluate({"field_at_least": {"estimated_hours": 8}}, entity)
    assert not evaluator.evaluate(
        {"field_at_least": {"estimated_hours": 8, "actual_hours": 5}}, entity
    )
    assert evaluator.evaluate({"field_less_than": {"actual_hours": 3}}, entity)
    assert evaluator.evaluate({"field_at_most": {"actual_hours": 2}}, entity)
    assert evaluator.evaluate({"field_greater_than": {"estimated_hours": 9.5}}, entity)


def test_has_tags_requires_every_tag() -> None:
    """has_tags accepts a single tag or a list; tag objects with a name count."""
    entity = make_snapshot({"tags": ["urgent", {"name": "retainer"}]})
    assert evaluator.evaluate({"has_tags": "urgent"}, entity)
    assert evaluator.evaluate({"has_tags": ["urgent", "retainer"]}, entity)
    assert not evaluator.evaluate({"has_tags": ["urgent", "pitch"]}, entity)


def test_all_of_nests_condition_maps() -> None:
    """all_of is a conjunction of nested condition maps."""
    entity = make_snapshot({"priority": "high", "budget_cost": 2000})
    conditions = {
        "all_of": [
            {"entity_field_equals": {"priority": "high"}},
            {"budget_greater_than": 1000},
        ]
    }
    assert evaluator.evaluate(conditions, entity)
    conditions["all_of"].append({"has_tags": ["vip"]})
    assert not evaluator.evaluate(conditions, entity)


def test_unknown_condition_key_is_ignored() -> None:
    """An unrecognised key neither blocks nor satisfies the other conditions."""
    conditions = {"entity_field_equals": {"priority": "high"}, "notify_channel": "ops"}
    assert evaluator.evaluate(conditions, make_snapshot({"priority": "high"})) is True
    assert evaluator.evaluate(conditions, make_snapshot({"priority": "low"})) is False
    assert ignored_keys(parse_conditions(conditions)) == ["notify_channel"]


def test_non_map_conditions_parse_as_empty() -> None:
    """A stored list or scalar is treated as no conditions instead of raising."""
    entity = make_snapshot({})
    assert parse_conditions(["priority", "high"]) == AllOf(())
    assert parse_conditions("high") == AllOf(())
    assert evaluator.evaluate(AllOf(()), entity)


def test_deduplication_window_is_not_a_condition() -> None:
    """deduplication_window_minutes is metadata and is ignored by evaluation."""
    entity = make_snapshot({})
    assert evaluator.evaluate({"deduplication_window_minutes": 30}, entity)
    assert parse_conditions({"deduplication_window_minutes": 30}) == AllOf(())


def test_parse_conditions_marks_malformed_operands_unsupported() -> None:
    """Malformed operands parse to Unsupported nodes instead of raising."""
    parsed = parse_conditions(
        {
            "budget_greater_than": "lots",
            "has_tags": [1, 2],
            "field_at_least": [],
            "entity_field_equals": "high",
            "all_of": "nope",
        }
    )
    assert sorted(unsupported_keys(parsed)) == [
        "all_of",
        "budget_greater_than",
        "entity_field_equals",
        "field_at_least",
        "has_tags",
    ]


def test_parse_conditions_single_tag_becomes_tuple() -> None:
    """A bare tag string is normalised to a one-element HasTags."""
    parsed = parse_conditions({"has_tags": "urgent"})
    assert parsed.conditions == (HasTags(("urgent",)),)


def test_nested_keys_are_reported() -> None:
    """Malformed and unrecognised keys inside all_of are reported too."""
    parsed = parse_conditions({"all_of": [{"mystery": 1, "has_tags": 7}]})
    assert ignored_keys(parsed) == ["mystery"]
    assert unsupported_keys(parsed) == ["has_tags"]
    assert isinstance(parsed.conditions[0].conditions[0].conditions[1], Unsupported)


def test_to_decimal_rejects_bools_and_non_finite_values() -> None:
    """Booleans, NaN and infinities are not numbers for comparison purposes."""
    assert to_decimal(True) is None
    assert to_decimal("NaN") is None
    assert to_decimal("Infinity") is None
    assert to_decimal(" 12.5 ") == Decimal("12.5")
    assert to_decimal(3) == Decimal("3")

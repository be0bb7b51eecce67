"""Unit tests for TriggerMatcher (structural query, then chain/condition/dedup filters)."""

from datetime import UTC, datetime, timedelta

from agentflow.application.use_cases.triggers.trigger_matcher import TriggerMatcher
from agentflow.infrastructure.persistence.models.trigger import AgentTrigger
from agentflow.infrastructure.persistence.repositories.trigger_repo import _trigger_entity
from tests.fakes import FakeTriggerRepository, make_chain, make_snapshot, make_trigger

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def _matcher(*triggers) -> TriggerMatcher:
    return TriggerMatcher(FakeTriggerRepository(list(triggers)), clock=lambda: NOW)


async def _ids(matcher: TriggerMatcher, entity=None, from_status="draft", to_status="approved"):
    entity = entity or make_snapshot({"priority": "high"})
    found = await matcher.find_matching("t1", "work_order", from_status, to_status, entity)
    return [t.id for t in found]


async def test_matches_on_status_to_with_wildcard_from() -> None:
    """status_from None matches any previous status."""
    matcher = _matcher(make_trigger("a", status_from=None, status_to="approved"))
    assert await _ids(matcher) == ["a"]
    assert await _ids(matcher, to_status="in_progress") == []


async def test_both_status_filters_must_match() -> None:
    """When status_from is set, the previous status must equal it too."""
    matcher = _matcher(make_trigger("a", status_from="review", status_to="approved"))
    assert await _ids(matcher, from_status="draft") == []
    assert await _ids(matcher, from_status="review") == ["a"]


async def test_other_team_and_other_entity_type_never_match() -> None:
    """Triggers are scoped to team and entity type."""
    matcher = _matcher(
        make_trigger("other-team", team_id="t2"),
        make_trigger("task-trigger", entity_type="task"),
        make_trigger("mine"),
    )
    assert await _ids(matcher) == ["mine"]


async def test_disabled_trigger_and_disabled_chain_are_skipped() -> None:
    """A disabled trigger, a disabled chain and a missing chain never match."""
    matcher = _matcher(
        make_trigger("off", enabled=False),
        make_trigger("chain-off", chain=make_chain(enabled=False)),
        make_trigger("no-chain", chain=None),
        make_trigger("on"),
    )
    assert await _ids(matcher) == ["on"]


async def test_conditions_filter_candidates() -> None:
    """Triggers whose conditions are not met are dropped."""
    matcher = _matcher(
        make_trigger("high", trigger_conditions={"entity_field_equals": {"priority": "high"}}),
        make_trigger("low", trigger_conditions={"entity_field_equals": {"priority": "low"}}),
    )
    assert await _ids(matcher) == ["high"]


async def test_malformed_conditions_fail_closed() -> None:
    """A known key with a malformed operand keeps the trigger from firing."""
    matcher = _matcher(make_trigger("bad", trigger_conditions={"budget_greater_than": "lots"}))
    assert await _ids(matcher) == []


async def test_unrecognised_condition_keys_are_ignored(caplog) -> None:
    """An extra key does not disable an otherwise matching trigger."""
    matcher = _matcher(
        make_trigger(
            "extra",
            trigger_conditions={
                "entity_field_equals": {"priority": "high"},
                "moon_phase": "full",
            },
        )
    )
    with caplog.at_level("WARNING"):
        assert await _ids(matcher) == ["extra"]
    assert "moon_phase" in caplog.text


async def test_non_map_conditions_do_not_break_other_triggers() -> None:
    """A trigger whose stored conditions are a list still lets the others match."""
    matcher = _matcher(
        make_trigger("list-conditions", trigger_conditions=["priority", "high"], priority=5),
        make_trigger("fine", trigger_conditions={"entity_field_equals": {"priority": "high"}}),
    )
    assert await _ids(matcher) == ["list-conditions", "fine"]


async def test_dedup_window_suppresses_recent_trigger() -> None:
    """A trigger that fired inside its window is not matched again."""
    matcher = _matcher(
        make_trigger(
            "recent",
            trigger_conditions={"deduplication_window_minutes": 30},
            last_triggered_at=NOW - timedelta(minutes=5),
        ),
        make_trigger(
            "stale",
            trigger_conditions={"deduplication_window_minutes": 30},
            last_triggered_at=NOW - timedelta(minutes=45),
        ),
    )
    assert await _ids(matcher) == ["stale"]


async def test_results_ordered_by_priority_descending() -> None:
    """Higher priority first; equal priorities keep repository order."""
    matcher = _matcher(
        make_trigger("p1", priority=1),
        make_trigger("p10", priority=10),
        make_trigger("p5-first", priority=5),
        make_trigger("p5-second", priority=5),
    )
    assert await _ids(matcher) == ["p10", "p5-first", "p5-second", "p1"]


def test_stored_non_map_conditions_load_as_empty() -> None:
    """Rows with list or scalar conditions load as {} and have no dedup window."""
    for raw in (["priority", "high"], "high", 7):
        entity = _trigger_entity(
            AgentTrigger(
                id="trg-x",
                team_id="t1",
                name="x",
                entity_type="work_order",
                priority=0,
                enabled=True,
                trigger_conditions=raw,
            )
        )
        assert entity.trigger_conditions == {}
    assert make_trigger("raw-list", trigger_conditions=[1, 2]).dedup_window_minutes is None

"""Unit tests for DispatchPipeline: mark fired, then enqueue, per trigger."""

from datetime import UTC, datetime, timedelta

from agentflow.application.use_cases.triggers.dispatch_pipeline import DispatchPipeline
from agentflow.shared.context import set_correlation_id
from tests.fakes import FakeJobQueue, FakeTriggerRepository, make_snapshot, make_trigger

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


async def test_dispatch_marks_fired_and_enqueues_job() -> None:
    """Each trigger gets last_triggered_at = now and one job carrying ids only."""
    trigger = make_trigger("a")
    repo = FakeTriggerRepository([trigger])
    queue = FakeJobQueue()
    pipeline = DispatchPipeline(repo, queue, clock=lambda: NOW)
    set_correlation_id("corr-1")
    try:
        report = await pipeline.dispatch([trigger], make_snapshot(), acting_user_id="u1")
    finally:
        set_correlation_id(None)

    assert report.dispatched == ["a"]
    assert trigger.last_triggered_at == NOW
    assert len(queue.jobs) == 1
    job = queue.jobs[0]
    assert (job.trigger_id, job.team_id, job.entity_type, job.entity_id) == (
        "a",
        "t1",
        "work_order",
        "wo1",
    )
    assert job.acting_user_id == "u1"
    assert (job.from_status, job.to_status) == ("draft", "approved")
    assert job.correlation_id == "corr-1"
    assert job.attempt == 1


async def test_lost_dedup_race_is_reported_suppressed() -> None:
    """When the conditional update loses to a concurrent firing, nothing is enqueued."""
    trigger = make_trigger(
        "a",
        trigger_conditions={"deduplication_window_minutes": 60},
        last_triggered_at=NOW - timedelta(minutes=1),
    )
    queue = FakeJobQueue()
    pipeline = DispatchPipeline(FakeTriggerRepository([trigger]), queue, clock=lambda: NOW)

    report = await pipeline.dispatch([trigger], make_snapshot(), acting_user_id=None)

    assert report.suppressed == ["a"]
    assert report.dispatched == []
    assert queue.jobs == []


async def test_failure_on_one_trigger_does_not_block_others() -> None:
    """A database or queue error is isolated to its own trigger."""
    db_fail, queue_fail, ok = make_trigger("db"), make_trigger("q"), make_trigger("ok")
    repo = FakeTriggerRepository([db_fail, queue_fail, ok])
    repo.fail_mark_fired.add("db")
    queue = FakeJobQueue()
    queue.fail_for.add("q")
    pipeline = DispatchPipeline(repo, queue, clock=lambda: NOW)

    report = await pipeline.dispatch([db_fail, queue_fail, ok], make_snapshot(), None)

    assert report.failed == ["db", "q"]
    assert report.dispatched == ["ok"]
    assert [j.trigger_id for j in queue.jobs] == ["ok"]


async def test_enqueue_failure_keeps_last_triggered_at() -> None:
    """last_triggered_at is written before enqueueing and is not rolled back."""
    trigger = make_trigger("q")
    queue = FakeJobQueue()
    queue.fail_for.add("q")
    pipeline = DispatchPipeline(FakeTriggerRepository([trigger]), queue, clock=lambda: NOW)

    await pipeline.dispatch([trigger], make_snapshot(), None)

    assert trigger.last_triggered_at == NOW

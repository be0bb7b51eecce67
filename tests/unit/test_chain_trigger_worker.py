"""Unit tests for ChainTriggerWorker: process, retry with backoff, give up."""

import asyncio

from agentflow.application.dtos.trigger import ChainTriggerJob
from agentflow.infrastructure.queue import ChainTriggerWorker, InMemoryJobQueue
from agentflow.shared.context import get_correlation_id
from tests.fakes import FakeJobQueue

JOB = ChainTriggerJob(
    trigger_id="trg1",
    team_id="t1",
    entity_type="work_order",
    entity_id="wo1",
    acting_user_id=None,
    correlation_id="corr-9",
)


async def test_successful_job_runs_with_its_correlation_id() -> None:
    """The handler sees the job's correlation id; it is cleared afterwards."""
    seen: list[str | None] = []

    async def handler(job):
        seen.append(get_correlation_id())

    worker = ChainTriggerWorker(FakeJobQueue(), handler)
    await worker.process(JOB)

    assert seen == ["corr-9"]
    assert get_correlation_id() is None


async def test_failed_job_is_retried_with_backoff() -> None:
    """A raising handler schedules the next attempt after backoff_seconds."""
    queue = FakeJobQueue()

    async def handler(job):
        raise RuntimeError("database went away")

    worker = ChainTriggerWorker(queue, handler, max_attempts=3, backoff_seconds=60)
    await worker.process(JOB)

    [(retry, delay)] = queue.retries
    assert retry.attempt == 2
    assert retry.trigger_id == "trg1"
    assert delay == 60


async def test_job_abandoned_after_max_attempts() -> None:
    """The last attempt is not retried."""
    queue = FakeJobQueue()

    async def handler(job):
        raise RuntimeError("still broken")

    worker = ChainTriggerWorker(queue, handler, max_attempts=3)
    await worker.process(ChainTriggerJob(**{**JOB.to_dict(), "attempt": 3}))

    assert queue.retries == []


async def test_run_once_reports_whether_a_job_ran() -> None:
    """run_once returns False on an empty queue."""
    queue = InMemoryJobQueue()
    handled: list[ChainTriggerJob] = []

    async def handler(job):
        handled.append(job)

    worker = ChainTriggerWorker(queue, handler, poll_timeout_seconds=0)
    assert await worker.run_once() is False
    await queue.enqueue(JOB)
    assert await worker.run_once() is True
    assert handled == [JOB]


async def test_run_stops_when_event_is_set() -> None:
    """run() drains jobs until the stop event is set."""
    queue = InMemoryJobQueue()
    stop = asyncio.Event()
    handled: list[str] = []

    async def handler(job):
        handled.append(job.trigger_id)
        stop.set()

    await queue.enqueue(JOB)
    worker = ChainTriggerWorker(queue, handler, poll_timeout_seconds=0)
    await asyncio.wait_for(worker.run(stop), timeout=5)

    assert handled == ["trg1"]

"""Unit tests for the in-memory and Redis job queues.

The Redis client is an AsyncMock; these tests check the commands issued,
not Redis itself.
"""

import json
import time
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from agentflow.application.dtos.trigger import ChainTriggerJob
from agentflow.domain.exceptions import QueueUnavailableException
from agentflow.infrastructure.queue import InMemoryJobQueue, RedisJobQueue

JOB = ChainTriggerJob(
    trigger_id="trg1",
    team_id="t1",
    entity_type="work_order",
    entity_id="wo1",
    acting_user_id="u1",
    correlation_id="corr-1",
)


def test_job_payload_round_trips_and_ignores_unknown_keys() -> None:
    """from_dict drops keys it does not know (older or newer producers)."""
    data = {**JOB.to_dict(), "priority": 5}
    assert ChainTriggerJob.from_dict(data) == JOB
    assert JOB.next_attempt().attempt == 2
    assert JOB.next_attempt().trigger_id == "trg1"


async def test_memory_queue_fifo_and_timeout() -> None:
    """Jobs come out in order; an empty queue returns None after the timeout."""
    queue = InMemoryJobQueue()
    second = ChainTriggerJob(**{**JOB.to_dict(), "trigger_id": "trg2"})
    await queue.enqueue(JOB)
    await queue.enqueue(second)
    assert await queue.dequeue(0) == JOB
    assert await queue.dequeue(0) == second
    assert await queue.dequeue(0) is None


async def test_memory_queue_delays_retries() -> None:
    """A retry is not dequeued before its delay has elapsed."""
    queue = InMemoryJobQueue()
    await queue.schedule_retry(JOB, 3600)
    assert queue.pending == 1
    assert queue.delayed == [JOB]
    assert await queue.dequeue(0) is None

    await queue.schedule_retry(JOB.next_attempt(), 0)
    job = await queue.dequeue(0)
    assert job is not None and job.attempt == 2


def _redis_queue() -> tuple[RedisJobQueue, AsyncMock]:
    client = AsyncMock()
    client.zrangebyscore.return_value = []
    return RedisJobQueue(client, "jobs"), client


async def test_redis_enqueue_pushes_json_payload() -> None:
    """enqueue LPUSHes the job as JSON onto the ready list."""
    queue, client = _redis_queue()
    await queue.enqueue(JOB)
    key, raw = client.lpush.await_args.args
    assert key == "jobs"
    assert json.loads(raw)["trigger_id"] == "trg1"


async def test_redis_enqueue_failure_raises_queue_unavailable() -> None:
    """Broker errors surface as QueueUnavailableException."""
    queue, client = _redis_queue()
    client.lpush.side_effect = RedisConnectionError("connection refused")
    with pytest.raises(QueueUnavailableException):
        await queue.enqueue(JOB)


async def test_redis_dequeue_promotes_due_retries_first() -> None:
    """Due delayed jobs are moved to the ready list before BRPOP."""
    queue, client = _redis_queue()
    raw = json.dumps(JOB.to_dict())
    client.zrangebyscore.return_value = [raw]
    client.zrem.return_value = 1
    client.brpop.return_value = ("jobs", raw)

    job = await queue.dequeue(5)

    assert job == JOB
    client.zrem.assert_awaited_once_with("jobs:delayed", raw)
    client.lpush.assert_awaited_once_with("jobs", raw)
    client.brpop.assert_awaited_once_with(["jobs"], timeout=5)


async def test_redis_promotion_lost_to_another_worker_is_skipped() -> None:
    """When ZREM removes nothing another worker already promoted the job."""
    queue, client = _redis_queue()
    client.zrangebyscore.return_value = ["{}"]
    client.zrem.return_value = 0
    client.brpop.return_value = None

    assert await queue.dequeue(1) is None
    client.lpush.assert_not_awaited()


async def test_redis_dequeue_discards_malformed_payload() -> None:
    """A payload that is not a job is logged and dropped."""
    queue, client = _redis_queue()
    client.brpop.return_value = ("jobs", "not json")
    assert await queue.dequeue(1) is None


async def test_redis_schedule_retry_scores_by_ready_time() -> None:
    """Retries go into the delayed sorted set scored by when they become ready."""
    queue, client = _redis_queue()
    before = time.time()
    await queue.schedule_retry(JOB.next_attempt(), 60)
    key, mapping = client.zadd.await_args.args
    assert key == "jobs:delayed"
    [(raw, score)] = mapping.items()
    assert json.loads(raw)["attempt"] == 2
    assert before + 60 <= score <= time.time() + 60


async def test_redis_ping_reports_failure_as_false() -> None:
    """ping() never raises."""
    queue, client = _redis_queue()
    client.ping.side_effect = RedisConnectionError("down")
    assert await queue.ping() is False

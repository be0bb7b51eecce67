"""Redis-backed chain-trigger job queue (implements IJobQueue).

Ready jobs are a list (LPUSH / BRPOP). Retries wait in a sorted set scored
by the time they become ready and are moved to the list by dequeue().
"""

from __future__ import annotations

import json
import time

import redis.asyncio as redis

from agentflow.application.dtos.trigger import ChainTriggerJob
from agentflow.core.config import Settings
from agentflow.domain.exceptions import QueueUnavailableException
from agentflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Delayed jobs promoted per dequeue call.
_PROMOTE_BATCH = 100


class RedisJobQueue:
    def __init__(self, client: redis.Redis, queue_name: str) -> None:
        self.redis = client
        self.ready_key = queue_name
        self.delayed_key = f"{queue_name}:delayed"

    @classmethod
    def from_settings(cls, settings: Settings) -> RedisJobQueue:
        password = settings.redis_password
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        return cls(client, settings.queue_name)

    async def enqueue(self, job: ChainTriggerJob) -> None:
        try:
            await self.redis.lpush(self.ready_key, json.dumps(job.to_dict()))
        except redis.RedisError as e:
            logger.error("Enqueue failed for trigger %s: %s", job.trigger_id, e)
            raise QueueUnavailableException(f"Job queue unavailable: {e}") from e

    async def dequeue(self, timeout_seconds: int) -> ChainTriggerJob | None:
        await self._promote_due()
        item = await self.redis.brpop([self.ready_key], timeout=timeout_seconds)
        if item is None:
            return None
        _, raw = item
        try:
            return ChainTriggerJob.from_dict(json.loads(raw))
        except (ValueError, TypeError):
            logger.error("Discarding malformed job payload: %.200s", raw)
            return None

    async def schedule_retry(self, job: ChainTriggerJob, delay_seconds: int) -> None:
        ready_at = time.time() + delay_seconds
        try:
            await self.redis.zadd(self.delayed_key, {json.dumps(job.to_dict()): ready_at})
        except redis.RedisError as e:
            raise QueueUnavailableException(f"Job queue unavailable: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except redis.RedisError:
            return False

    async def close(self) -> None:
        await self.redis.aclose()

    async def _promote_due(self) -> None:
        due = await self.redis.zrangebyscore(
            self.delayed_key, 0, time.time(), start=0, num=_PROMOTE_BATCH
        )
        for raw in due:
            # Only the worker that removes the entry pushes it, so it runs once.
            if await self.redis.zrem(self.delayed_key, raw):
                await self.redis.lpush(self.ready_key, raw)

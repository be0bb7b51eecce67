"""Chain-trigger job queue backends and the worker loop."""

from agentflow.core.config import Settings
from agentflow.infrastructure.queue.memory_queue import InMemoryJobQueue
from agentflow.infrastructure.queue.redis_queue import RedisJobQueue
from agentflow.infrastructure.queue.worker import ChainTriggerWorker


def build_job_queue(settings: Settings) -> InMemoryJobQueue | RedisJobQueue:
    if settings.queue_backend == "memory":
        return InMemoryJobQueue()
    return RedisJobQueue.from_settings(settings)


__all__ = ["ChainTriggerWorker", "InMemoryJobQueue", "RedisJobQueue", "build_job_queue"]

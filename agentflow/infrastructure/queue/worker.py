"""Chain-trigger worker loop: dequeue, process, retry with fixed backoff."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from agentflow.application.dtos.trigger import ChainTriggerJob
from agentflow.application.interfaces.services import IJobQueue
from agentflow.shared.context import set_correlation_id
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.utils.ids import new_correlation_id

logger = get_logger(__name__)

JobHandler = Callable[[ChainTriggerJob], Awaitable[Any]]


class ChainTriggerWorker:
    """Runs each job through handler; a raising handler is retried up to max_attempts."""

    def __init__(
        self,
        queue: IJobQueue,
        handler: JobHandler,
        *,
        max_attempts: int = 3,
        backoff_seconds: int = 60,
        poll_timeout_seconds: int = 5,
    ) -> None:
        self._queue = queue
        self._handler = handler
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._poll_timeout = poll_timeout_seconds

    async def run(self, stop: asyncio.Event) -> None:
        logger.info("Chain trigger worker started")
        while not stop.is_set():
            try:
                await self.run_once()
            except Exception:
                logger.exception("Worker loop error; backing off")
                await asyncio.sleep(self._poll_timeout)
        logger.info("Chain trigger worker stopped")

    async def run_once(self) -> bool:
        """Process at most one job; False when none was ready."""
        job = await self._queue.dequeue(self._poll_timeout)
        if job is None:
            return False
        await self.process(job)
        return True

    async def process(self, job: ChainTriggerJob) -> None:
        set_correlation_id(job.correlation_id or new_correlation_id())
        try:
            await self._handler(job)
        except Exception:
            logger.exception(
                "Chain job failed (trigger_id=%s, team_id=%s, attempt=%d/%d)",
                job.trigger_id,
                job.team_id,
                job.attempt,
                self._max_attempts,
            )
            if job.attempt < self._max_attempts:
                await self._queue.schedule_retry(job.next_attempt(), self._backoff_seconds)
            else:
                logger.error(
                    "Chain job for trigger %s abandoned after %d attempts",
                    job.trigger_id,
                    job.attempt,
                )
        finally:
            set_correlation_id(None)

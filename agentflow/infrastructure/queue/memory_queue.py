"""In-process job queue for single-process deployments and tests (implements IJobQueue)."""

from __future__ import annotations

import asyncio
import time

from agentflow.application.dtos.trigger import ChainTriggerJob


class InMemoryJobQueue:
    def __init__(self) -> None:
        self._ready: asyncio.Queue[ChainTriggerJob] = asyncio.Queue()
        self._delayed: list[tuple[float, ChainTriggerJob]] = []

    async def enqueue(self, job: ChainTriggerJob) -> None:
        await self._ready.put(job)

    async def dequeue(self, timeout_seconds: int) -> ChainTriggerJob | None:
        self._promote_due()
        # Never blocks when a job is ready; timeout_seconds may be 0.
        if not self._ready.empty():
            return self._ready.get_nowait()
        try:
            return await asyncio.wait_for(self._ready.get(), timeout=timeout_seconds)
        except TimeoutError:
            return None

    async def schedule_retry(self, job: ChainTriggerJob, delay_seconds: int) -> None:
        self._delayed.append((time.monotonic() + delay_seconds, job))

    @property
    def pending(self) -> int:
        """Ready plus delayed jobs."""
        return self._ready.qsize() + len(self._delayed)

    @property
    def delayed(self) -> list[ChainTriggerJob]:
        return [job for _, job in self._delayed]

    def _promote_due(self) -> None:
        now = time.monotonic()
        due = [job for ready_at, job in self._delayed if ready_at <= now]
        self._delayed = [(ready_at, job) for ready_at, job in self._delayed if ready_at > now]
        for job in due:
            self._ready.put_nowait(job)

"""Chain-trigger worker: consume queued jobs and run their workflows.

Usage:
    python -m scripts.run_worker
Each job runs in its own transaction. Failed jobs are retried after
JOB_RETRY_BACKOFF_SECONDS, up to JOB_MAX_ATTEMPTS. SIGINT/SIGTERM finish
the current job and exit. Requires QUEUE_BACKEND=redis (a memory queue is
not shared with the API process).
"""

import asyncio
import signal
import sys

import httpx

from agentflow.application.dtos.trigger import ChainTriggerJob
from agentflow.core.config import get_settings
from agentflow.infrastructure.container import ServiceContainer
from agentflow.infrastructure.persistence.database import dispose_engine, session_scope
from agentflow.infrastructure.queue import ChainTriggerWorker, RedisJobQueue
from agentflow.infrastructure.services import HttpAgentRunner, PromptRenderer
from agentflow.shared.telemetry.logging import get_logger, setup_logging
from agentflow.shared.telemetry.telemetry import get_telemetry, init_telemetry

logger = get_logger("scripts.run_worker")


async def main() -> int:
    settings = get_settings()
    setup_logging()
    if settings.queue_backend != "redis":
        logger.error("run_worker needs QUEUE_BACKEND=redis (got %s)", settings.queue_backend)
        return 1
    if settings.telemetry_enabled:
        init_telemetry(
            f"{settings.app_name}-worker",
            settings.app_version,
            environment=settings.telemetry_environment,
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    queue = RedisJobQueue.from_settings(settings)
    renderer = PromptRenderer()
    http_client: httpx.AsyncClient | None = None
    agent_runner: HttpAgentRunner | None = None
    if settings.llm_enabled:
        http_client = httpx.AsyncClient(timeout=settings.llm_timeout_seconds)
        agent_runner = HttpAgentRunner.from_settings(settings, client=http_client)

    async def handle(job: ChainTriggerJob) -> None:
        async with session_scope() as session:
            container = ServiceContainer(
                session, settings, queue=queue, agent_runner=agent_runner, renderer=renderer
            )
            await container.chain_trigger_processor().process(job)

    worker = ChainTriggerWorker(
        queue,
        handle,
        max_attempts=settings.job_max_attempts,
        backoff_seconds=settings.job_retry_backoff_seconds,
        poll_timeout_seconds=settings.worker_poll_timeout_seconds,
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    try:
        await worker.run(stop)
    finally:
        if http_client is not None:
            await http_client.aclose()
        await queue.close()
        telemetry = get_telemetry()
        if telemetry is not None:
            telemetry.shutdown()
        await dispose_engine()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

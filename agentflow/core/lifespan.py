"""Application lifespan: startup and shutdown.

Wiring of process-wide infrastructure only: job queue (and its in-process
worker for the memory backend), LLM runner and its HTTP client, prompt
renderer, telemetry, DB engine dispose.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from agentflow.application.dtos.trigger import ChainTriggerJob
from agentflow.core.config import get_settings
from agentflow.infrastructure.container import ServiceContainer
from agentflow.infrastructure.persistence.database import (
    dispose_engine,
    get_engine,
    session_scope,
)
from agentflow.infrastructure.queue import (
    ChainTriggerWorker,
    InMemoryJobQueue,
    RedisJobQueue,
    build_job_queue,
)
from agentflow.infrastructure.services import HttpAgentRunner, PromptRenderer
from agentflow.shared.telemetry.telemetry import get_telemetry, init_telemetry

logger = logging.getLogger(__name__)


def _in_process_job_handler(app: FastAPI):
    """Run one chain job in its own transaction with the app's shared services."""

    async def handle(job: ChainTriggerJob) -> None:
        async with session_scope() as session:
            container = ServiceContainer(
                session,
                get_settings(),
                queue=app.state.job_queue,
                agent_runner=app.state.agent_runner,
                renderer=app.state.prompt_renderer,
            )
            await container.chain_trigger_processor().process(job)

    return handle


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), job queue, LLM runner (if
    enabled), in-process worker (memory queue only). Shutdown order: worker
    stop, LLM HTTP client close, queue close, telemetry shutdown, SQL engine
    dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.telemetry_enabled:
        telemetry = init_telemetry(
            settings.app_name,
            settings.app_version,
            environment=settings.telemetry_environment,
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_fastapi(app)
        engine = get_engine()
        if engine is not None:
            telemetry.instrument_sqlalchemy(engine)
        logger.info("Telemetry initialized")

    queue = build_job_queue(settings)
    if isinstance(queue, RedisJobQueue) and not await queue.ping():
        # Keep serving: dispatch reports every trigger as failed until Redis returns.
        logger.warning(
            "Redis job queue at %s:%s unreachable at startup",
            settings.redis_host,
            settings.redis_port,
        )
    app.state.job_queue = queue

    app.state.prompt_renderer = PromptRenderer()
    if settings.llm_enabled:
        app.state.llm_http_client = httpx.AsyncClient(timeout=settings.llm_timeout_seconds)
        app.state.agent_runner = HttpAgentRunner.from_settings(
            settings, client=app.state.llm_http_client
        )
        logger.info("LLM runner enabled (model=%s)", settings.llm_model)
    else:
        app.state.llm_http_client = None
        app.state.agent_runner = None

    # A memory queue is only visible to this process, so it is consumed here.
    stop_worker = asyncio.Event()
    worker_task: asyncio.Task | None = None
    if isinstance(queue, InMemoryJobQueue):
        worker = ChainTriggerWorker(
            queue,
            _in_process_job_handler(app),
            max_attempts=settings.job_max_attempts,
            backoff_seconds=settings.job_retry_backoff_seconds,
            poll_timeout_seconds=settings.worker_poll_timeout_seconds,
        )
        worker_task = asyncio.create_task(worker.run(stop_worker))
        logger.info("In-process chain trigger worker started (memory queue)")

    yield

    # ---- Shutdown ----
    if worker_task is not None:
        stop_worker.set()
        await worker_task
        logger.info("In-process chain trigger worker stopped")

    if getattr(app.state, "llm_http_client", None) is not None:
        await app.state.llm_http_client.aclose()
        app.state.llm_http_client = None
        logger.info("LLM HTTP client closed")

    queue = getattr(app.state, "job_queue", None)
    if isinstance(queue, RedisJobQueue):
        await queue.close()
        logger.info("Job queue connection closed")

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        logger.info("Telemetry shutdown complete")

    await dispose_engine()
    logger.info("Database engine disposed")

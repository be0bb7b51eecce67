"""Pytest configuration and fixtures for agentflow.

Uses agentflow.main:app for HTTP tests and
agentflow.infrastructure.persistence.database for DB-dependent fixtures.
ASGITransport does not run the lifespan, so API tests override the
use-case dependencies with in-memory fakes (see tests/fakes.py). The
pm_copilot fixture wires the real PM Copilot use cases over those fakes.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.application.dtos.tool import LLMCompletion
from agentflow.application.services.budget_gateway import BudgetGateway
from agentflow.application.services.suggestion_schema_validator import SuggestionSchemaValidator
from agentflow.application.services.tool_gateway import ToolGateway
from agentflow.application.services.work_order_context import WorkOrderContextBuilder
from agentflow.application.use_cases.workflows.approval import (
    ApprovalService,
    InboxDecisionHandler,
)
from agentflow.application.use_cases.workflows.pm_copilot import PMCopilotWorkflow
from agentflow.application.use_cases.workflows.registry import WorkflowRegistry
from agentflow.application.use_cases.workflows.start_pm_copilot import StartPMCopilot
from agentflow.application.use_cases.workflows.state_machine import WorkflowRunner
from agentflow.application.use_cases.workflows.suggestions import SuggestionService
from agentflow.core.config import get_settings
from agentflow.core.limiter import limiter
from agentflow.infrastructure.persistence import database
from agentflow.infrastructure.services.prompt_renderer import PromptRenderer
from agentflow.infrastructure.tools import build_tool_registry
from agentflow.main import app
from tests.fakes import (
    FakeActivityLog,
    FakeAgentConfigurationRepository,
    FakeDeliverableRepository,
    FakeInboxRepository,
    FakePlaybookRepository,
    FakeTaskRepository,
    FakeWorkflowStateRepository,
    FakeWorkOrderRepository,
    make_config,
    make_work_order,
)

TEAM_HEADERS = {"X-Team-ID": "t1", "X-User-ID": "u1"}
INTERNAL_TOKEN = "test-internal-token"
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def clock() -> datetime:
    return NOW


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI). Rate limits are off."""
    limiter.enabled = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    limiter.enabled = True


@pytest.fixture
def override() -> Iterator:
    """Register dependency overrides for one test; cleared afterwards.

    Usage: override(get_start_pm_copilot, lambda: fake_use_case)
    """

    def _set(dependency, provider) -> None:
        app.dependency_overrides[dependency] = provider

    yield _set
    app.dependency_overrides.clear()


@pytest.fixture
def internal_token(monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Configure INTERNAL_API_TOKEN for the test and return it."""
    monkeypatch.setenv("INTERNAL_API_TOKEN", INTERNAL_TOKEN)
    get_settings.cache_clear()
    yield INTERNAL_TOKEN
    monkeypatch.delenv("INTERNAL_API_TOKEN", raising=False)
    get_settings.cache_clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL pointing at a migrated Postgres database. Skips
    (pytest.skip) when it is not configured. Use @pytest.mark.requires_db to
    mark tests that need this fixture; run without DB via:
    pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


class ScriptedAgentRunner:
    """LLM runner returning canned text chosen by a marker found in the prompt."""

    def __init__(self, replies: dict[str, str], cost: Decimal = Decimal("0.002")) -> None:
        self.replies = replies
        self.cost = cost
        self.prompts: list[str] = []

    async def complete(self, system_prompt, prompt, *, max_tokens=None) -> LLMCompletion:
        self.prompts.append(prompt)
        for marker, text in self.replies.items():
            if marker in prompt:
                return LLMCompletion(text=text, tokens_used=200, cost=self.cost, model="test")
        return LLMCompletion(text="I cannot help with that.", tokens_used=10, cost=self.cost)


@dataclass
class PMCopilotHarness:
    work_orders: FakeWorkOrderRepository
    deliverables: FakeDeliverableRepository
    tasks: FakeTaskRepository
    inbox: FakeInboxRepository
    states: FakeWorkflowStateRepository
    configs: FakeAgentConfigurationRepository
    activity: FakeActivityLog
    runner: WorkflowRunner
    registry: WorkflowRegistry
    start: StartPMCopilot
    suggestions: SuggestionService
    decisions: InboxDecisionHandler

    def activity_for(self, tool_name: str) -> list[dict[str, Any]]:
        return [row for row in self.activity.rows if row["tool_name"] == tool_name]


@pytest.fixture
def pm_copilot():
    """Factory: pm_copilot(mode=..., config=..., agent_runner=..., playbooks=...)."""

    def _build(
        *,
        mode: str = "full",
        config: dict[str, Any] | None = None,
        with_config: bool = True,
        agent_runner: ScriptedAgentRunner | None = None,
        playbooks: list[dict[str, Any]] | None = None,
        work_order: dict[str, Any] | None = None,
    ) -> PMCopilotHarness:
        work_orders = FakeWorkOrderRepository(
            [make_work_order(pm_copilot_mode=mode, **(work_order or {}))]
        )
        deliverables = FakeDeliverableRepository()
        tasks = FakeTaskRepository()
        inbox = FakeInboxRepository()
        states = FakeWorkflowStateRepository()
        configs = FakeAgentConfigurationRepository(
            [make_config(**(config or {}))] if with_config else []
        )
        configs.agent_codes["pm_copilot"] = "agent1"
        activity = FakeActivityLog()

        context_builder = WorkOrderContextBuilder(work_orders, deliverables, tasks)
        registry_tools = build_tool_registry(
            context_builder,
            deliverables,
            tasks,
            runner=agent_runner,
            renderer=PromptRenderer() if agent_runner else None,
        )
        gateway = ToolGateway(registry_tools, BudgetGateway(configs, clock=clock), activity)
        workflow = PMCopilotWorkflow(
            context_builder=context_builder,
            playbook_repo=FakePlaybookRepository(playbooks),
            inbox_repo=inbox,
            config_repo=configs,
            tool_gateway=gateway,
            validator=SuggestionSchemaValidator(),
            clock=clock,
        )
        registry = WorkflowRegistry([workflow.definition()])
        runner = WorkflowRunner(states, ApprovalService(inbox, states, clock=clock), clock=clock)
        return PMCopilotHarness(
            work_orders=work_orders,
            deliverables=deliverables,
            tasks=tasks,
            inbox=inbox,
            states=states,
            configs=configs,
            activity=activity,
            runner=runner,
            registry=registry,
            start=StartPMCopilot(work_orders, configs, runner, registry),
            suggestions=SuggestionService(
                inbox, states, work_orders, deliverables, tasks, clock=clock
            ),
            decisions=InboxDecisionHandler(inbox, states, runner, registry, clock=clock),
        )

    return _build

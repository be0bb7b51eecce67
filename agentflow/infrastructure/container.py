"""Composition root shared by the API, the worker and the scripts.

ServiceContainer wires repositories, services and use cases onto one
AsyncSession. Pieces are built lazily, so a request only constructs what
its route touches.
"""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.application.interfaces.services import IAgentRunner, IJobQueue, IPromptRenderer
from agentflow.application.services import (
    BudgetGateway,
    SuggestionSchemaValidator,
    ToolGateway,
    WorkOrderContextBuilder,
)
from agentflow.application.use_cases.budget import ResetAgentSpend
from agentflow.application.use_cases.triggers import (
    ChainTriggerProcessor,
    DispatchPipeline,
    StatusChangeHandler,
    TriggerMatcher,
)
from agentflow.application.use_cases.workflows import (
    ApprovalService,
    InboxDecisionHandler,
    PMCopilotWorkflow,
    StartPMCopilot,
    SuggestionService,
    WorkflowRegistry,
    WorkflowRunner,
)
from agentflow.core.config import Settings
from agentflow.infrastructure.persistence.repositories import (
    ActivityLogRepository,
    AgentConfigurationRepository,
    ChainExecutionRepository,
    DeliverableRepository,
    InboxRepository,
    PlaybookRepository,
    TaskRepository,
    TriggerRepository,
    WorkflowStateRepository,
    WorkOrderRepository,
)
from agentflow.infrastructure.services import SqlEntityReader
from agentflow.infrastructure.tools import build_tool_registry


class ServiceContainer:
    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        *,
        queue: IJobQueue | None = None,
        agent_runner: IAgentRunner | None = None,
        renderer: IPromptRenderer | None = None,
    ) -> None:
        self.db = db
        self.settings = settings
        self.queue = queue
        self.agent_runner = agent_runner
        self.renderer = renderer

    # Repositories

    @cached_property
    def trigger_repo(self) -> TriggerRepository:
        return TriggerRepository(self.db)

    @cached_property
    def state_repo(self) -> WorkflowStateRepository:
        return WorkflowStateRepository(self.db)

    @cached_property
    def config_repo(self) -> AgentConfigurationRepository:
        return AgentConfigurationRepository(self.db)

    @cached_property
    def activity_log_repo(self) -> ActivityLogRepository:
        return ActivityLogRepository(self.db)

    @cached_property
    def chain_execution_repo(self) -> ChainExecutionRepository:
        return ChainExecutionRepository(self.db)

    @cached_property
    def inbox_repo(self) -> InboxRepository:
        return InboxRepository(self.db)

    @cached_property
    def work_order_repo(self) -> WorkOrderRepository:
        return WorkOrderRepository(self.db)

    @cached_property
    def deliverable_repo(self) -> DeliverableRepository:
        return DeliverableRepository(self.db)

    @cached_property
    def task_repo(self) -> TaskRepository:
        return TaskRepository(self.db)

    @cached_property
    def playbook_repo(self) -> PlaybookRepository:
        return PlaybookRepository(self.db)

    @cached_property
    def entity_reader(self) -> SqlEntityReader:
        return SqlEntityReader(self.db)

    # Services

    @cached_property
    def context_builder(self) -> WorkOrderContextBuilder:
        return WorkOrderContextBuilder(self.work_order_repo, self.deliverable_repo, self.task_repo)

    @cached_property
    def tool_gateway(self) -> ToolGateway:
        registry = build_tool_registry(
            self.context_builder,
            self.deliverable_repo,
            self.task_repo,
            runner=self.agent_runner,
            renderer=self.renderer,
        )
        return ToolGateway(
            registry,
            BudgetGateway(self.config_repo),
            self.activity_log_repo,
            savepoint=self.db.begin_nested,
        )

    @cached_property
    def workflow_registry(self) -> WorkflowRegistry:
        pm_copilot = PMCopilotWorkflow(
            context_builder=self.context_builder,
            playbook_repo=self.playbook_repo,
            inbox_repo=self.inbox_repo,
            config_repo=self.config_repo,
            tool_gateway=self.tool_gateway,
            validator=SuggestionSchemaValidator(),
        )
        return WorkflowRegistry([pm_copilot.definition()])

    @cached_property
    def approval_service(self) -> ApprovalService:
        return ApprovalService(self.inbox_repo, self.state_repo)

    @cached_property
    def workflow_runner(self) -> WorkflowRunner:
        return WorkflowRunner(
            self.state_repo,
            self.approval_service,
            max_steps=self.settings.workflow_max_steps,
            savepoint=self.db.begin_nested,
        )

    # Use cases

    def status_change_handler(self) -> StatusChangeHandler:
        if self.queue is None:
            raise RuntimeError("Status change dispatch needs a job queue")
        return StatusChangeHandler(
            self.entity_reader,
            TriggerMatcher(self.trigger_repo),
            DispatchPipeline(self.trigger_repo, self.queue),
        )

    def chain_trigger_processor(self) -> ChainTriggerProcessor:
        return ChainTriggerProcessor(
            self.trigger_repo,
            self.entity_reader,
            self.work_order_repo,
            self.workflow_runner,
            self.workflow_registry,
            self.chain_execution_repo,
        )

    def start_pm_copilot(self) -> StartPMCopilot:
        return StartPMCopilot(
            self.work_order_repo, self.config_repo, self.workflow_runner, self.workflow_registry
        )

    def suggestion_service(self) -> SuggestionService:
        return SuggestionService(
            self.inbox_repo,
            self.state_repo,
            self.work_order_repo,
            self.deliverable_repo,
            self.task_repo,
        )

    def inbox_decision_handler(self) -> InboxDecisionHandler:
        return InboxDecisionHandler(
            self.inbox_repo, self.state_repo, self.workflow_runner, self.workflow_registry
        )

    def reset_agent_spend(self) -> ResetAgentSpend:
        return ResetAgentSpend(self.config_repo)

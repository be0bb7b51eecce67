"""Node and tool failures caused by the database. Require Postgres.

A statement that violates a constraint aborts the Postgres transaction it
runs in. Tools and nodes run inside savepoints, so the failed state, its
earlier data and the failure log row still get written afterwards.
"""

import pytest
from sqlalchemy import insert, select

from agentflow.application.dtos.tool import ToolOutput
from agentflow.application.dtos.workflow import Continue
from agentflow.application.services.budget_gateway import BudgetGateway
from agentflow.application.services.tool_gateway import ToolGateway
from agentflow.application.services.tool_registry import ToolRegistry
from agentflow.application.use_cases.workflows.state_machine import (
    WorkflowDefinition,
    WorkflowNode,
)
from agentflow.core.config import get_settings
from agentflow.infrastructure.container import ServiceContainer
from agentflow.infrastructure.persistence.models.agent import (
    AgentActivityLog,
    AgentConfiguration,
    AIAgent,
)
from agentflow.infrastructure.persistence.models.workflow_state import AgentWorkflowState
from agentflow.shared.enums import ToolCategory, WorkflowStatus
from agentflow.shared.utils.ids import generate_cuid


class DuplicateStateTool:
    """Inserts a workflow state row whose primary key already exists."""

    name = "duplicate_state"
    category = ToolCategory.CONTEXT
    description = "Violates the agent_workflow_state primary key"

    def __init__(self, db_session) -> None:
        self.db = db_session

    async def execute(self, team_id, params):
        await self.db.execute(
            insert(AgentWorkflowState).values(
                id=params["state_id"],
                team_id=team_id,
                workflow_class="duplicate",
                status=WorkflowStatus.RUNNING.value,
                current_node="start",
                state_data={},
            )
        )
        return ToolOutput()


async def _seed_config(db_session) -> AgentConfiguration:
    agent = AIAgent(code=f"pm_copilot_{generate_cuid()[:10]}", name="PM Copilot")
    db_session.add(agent)
    await db_session.flush()
    config = AgentConfiguration(team_id=f"team-{generate_cuid()[:12]}", ai_agent_id=agent.id)
    db_session.add(config)
    await db_session.flush()
    return config


@pytest.mark.requires_db
async def test_integrity_error_in_tool_leaves_state_failed_with_earlier_data(
    db_session,
) -> None:
    """The state ends failed, keeps the first node's output and the failure is logged."""
    seeded = await _seed_config(db_session)
    container = ServiceContainer(db_session, get_settings())
    config = await container.config_repo.get_for_agent(seeded.team_id, seeded.ai_agent_id)
    gateway = ToolGateway(
        ToolRegistry([DuplicateStateTool(db_session)]),
        BudgetGateway(container.config_repo),
        container.activity_log_repo,
        savepoint=db_session.begin_nested,
    )

    async def draft(state):
        return Continue({"draft": "kept"})

    async def persist(state):
        result = await gateway.execute(
            config,
            "duplicate_state",
            {"state_id": state.id},
            workflow_state_id=state.id,
        )
        if not result.success:
            raise RuntimeError(result.error)
        return Continue()

    definition = WorkflowDefinition(
        "savepoint_demo", [WorkflowNode("draft", draft), WorkflowNode("persist", persist)]
    )
    state = await container.workflow_runner.start(
        definition, team_id=seeded.team_id, input_data={}
    )

    assert state.status == WorkflowStatus.FAILED
    assert "duplicate key" in state.error_message
    stored = await container.state_repo.get_by_id(state.id, seeded.team_id)
    assert stored.status == WorkflowStatus.FAILED
    assert stored.current_node == "persist"
    assert stored.state_data["draft"] == "kept"
    logged = await db_session.execute(
        select(AgentActivityLog.status).where(AgentActivityLog.workflow_state_id == state.id)
    )
    assert logged.scalars().all() == ["failed"]


@pytest.mark.requires_db
async def test_database_error_raised_by_node_keeps_transaction_usable(db_session) -> None:
    """A node that raises from a failed statement still lets the runner save the failure."""
    seeded = await _seed_config(db_session)
    container = ServiceContainer(db_session, get_settings())

    async def collide(state):
        await DuplicateStateTool(db_session).execute(state.team_id, {"state_id": state.id})
        return Continue()

    definition = WorkflowDefinition("collide_demo", [WorkflowNode("collide", collide)])
    state = await container.workflow_runner.start(
        definition, team_id=seeded.team_id, input_data={"work_order_id": "wo-1"}
    )

    stored = await container.state_repo.get_by_id(state.id, seeded.team_id)
    assert stored.status == WorkflowStatus.FAILED
    assert stored.failed_at is not None
    assert stored.state_data["input"] == {"work_order_id": "wo-1"}

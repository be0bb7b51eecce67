"""Unit tests for the built-in agent tools and build_tool_registry."""

from decimal import Decimal

import pytest

from agentflow.application.dtos.work import TaskResult
from agentflow.application.services.work_order_context import WorkOrderContextBuilder
from agentflow.domain.exceptions import ResourceNotFoundException, ValidationException
from agentflow.infrastructure.services.prompt_renderer import PromptRenderer
from agentflow.infrastructure.tools import (
    CreateDeliverableTool,
    CreateTaskTool,
    LLMCompletionTool,
    WorkOrderInfoTool,
    build_tool_registry,
)
from agentflow.shared.enums import ToolCategory
from tests.fakes import (
    FakeDeliverableRepository,
    FakeTaskRepository,
    FakeWorkOrderRepository,
    make_work_order,
)
from tests.conftest import ScriptedAgentRunner


def _task(task_id: str, status: str) -> TaskResult:
    return TaskResult(
        id=task_id,
        team_id="t1",
        work_order_id="wo1",
        title=f"Task {task_id}",
        description=None,
        status=status,
        estimated_hours=Decimal("2"),
        position_in_work_order=1,
    )


async def test_work_order_info_lists_open_tasks_only() -> None:
    """Done tasks count toward task_count but are not pending."""
    tasks = FakeTaskRepository([_task("a", "todo"), _task("b", "done")])
    builder = WorkOrderContextBuilder(
        FakeWorkOrderRepository([make_work_order()]), FakeDeliverableRepository(), tasks
    )

    output = await WorkOrderInfoTool(builder).execute("t1", {"work_order_id": "wo1"})

    assert output.cost == Decimal("0")
    assert output.data["work_order"]["title"] == "Website redesign"
    assert [t["id"] for t in output.data["pending_tasks"]] == ["a"]
    assert output.data["task_count"] == 2


async def test_work_order_info_outside_team_is_not_found() -> None:
    builder = WorkOrderContextBuilder(
        FakeWorkOrderRepository([make_work_order()]),
        FakeDeliverableRepository(),
        FakeTaskRepository(),
    )
    with pytest.raises(ResourceNotFoundException):
        await WorkOrderInfoTool(builder).execute("other-team", {"work_order_id": "wo1"})
    with pytest.raises(ValidationException):
        await WorkOrderInfoTool(builder).execute("t1", {})


async def test_create_task_coerces_hours_and_position() -> None:
    """String hours become Decimal; a non-integer position is dropped."""
    tasks = FakeTaskRepository()
    output = await CreateTaskTool(tasks).execute(
        "t1",
        {
            "work_order_id": "wo1",
            "title": "Draft copy",
            "estimated_hours": "3.5",
            "position_in_work_order": "first",
            "deliverable_id": "del9",
        },
    )

    call = tasks.calls[0]
    assert call["estimated_hours"] == Decimal("3.5")
    assert call["position_in_work_order"] is None
    assert call["deliverable_id"] == "del9"
    assert output.data == {"id": tasks.created[0].id, "title": "Draft copy"}


@pytest.mark.parametrize("params", [{"title": "No work order"}, {"work_order_id": "wo1"}])
async def test_create_tools_require_work_order_and_title(params) -> None:
    with pytest.raises(ValidationException):
        await CreateTaskTool(FakeTaskRepository()).execute("t1", params)
    with pytest.raises(ValidationException):
        await CreateDeliverableTool(FakeDeliverableRepository()).execute("t1", params)


async def test_create_deliverable_passes_optional_fields() -> None:
    deliverables = FakeDeliverableRepository()
    await CreateDeliverableTool(deliverables).execute(
        "t1",
        {
            "work_order_id": "wo1",
            "title": "Style guide",
            "deliverable_type": "document",
            "acceptance_criteria": ["Approved by client"],
        },
    )
    assert deliverables.calls[0]["deliverable_type"] == "document"
    assert deliverables.created[0].status == "draft"


async def test_llm_completion_reports_runner_cost() -> None:
    """The tool's cost is whatever the runner reported for the call."""
    runner = ScriptedAgentRunner({"Brand refresh": '{"alternatives": []}'}, cost=Decimal("0.004"))
    tool = LLMCompletionTool(runner, PromptRenderer())

    output = await tool.execute(
        "t1",
        {
            "template_key": "deliverables",
            "context": {"work_order": {"title": "Brand refresh"}, "playbooks": []},
        },
    )

    assert output.cost == Decimal("0.004")
    assert output.data["text"] == '{"alternatives": []}'
    with pytest.raises(ValidationException):
        await tool.execute("t1", {"context": {}})


def test_registry_includes_llm_tool_only_with_runner() -> None:
    builder = WorkOrderContextBuilder(
        FakeWorkOrderRepository(), FakeDeliverableRepository(), FakeTaskRepository()
    )
    plain = build_tool_registry(builder, FakeDeliverableRepository(), FakeTaskRepository())
    assert plain.names() == ["create_deliverable", "create_task", "work_order_info"]

    with_llm = build_tool_registry(
        builder,
        FakeDeliverableRepository(),
        FakeTaskRepository(),
        runner=ScriptedAgentRunner({}),
        renderer=PromptRenderer(),
    )
    assert "llm_completion" in with_llm.names()
    task_tool = with_llm.get("create_task")
    assert task_tool.category == ToolCategory.TASKS
    assert with_llm.required_permissions(task_tool) == ("can_modify_tasks",)

"""PM Copilot workflow: plan deliverables and tasks for a work order.

Nodes, in order:

    gather_context -> generate_deliverables -> checkpoint_deliverables
    -> generate_task_breakdown -> generate_insights -> present_results

checkpoint_deliverables pauses only in staged mode. Every agent call goes
through the ToolGateway under the agent's configuration, so permission and
budget rules apply and each call lands in the activity log. When the LLM is
unavailable, denied, or returns unusable output, the deterministic planning
in pm_copilot_planning is used instead.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

from agentflow.application.dtos.workflow import Continue, NodeResult, Pause, Terminate
from agentflow.application.interfaces.repositories import (
    IAgentConfigurationRepository,
    IInboxRepository,
    IPlaybookRepository,
)
from agentflow.application.interfaces.services import ISuggestionValidator
from agentflow.application.services.auto_approval import should_auto_approve
from agentflow.application.services.tool_gateway import ToolGateway
from agentflow.application.services.work_order_context import WorkOrderContextBuilder
from agentflow.application.use_cases.workflows.approval import APPROVABLE_TYPE
from agentflow.application.use_cases.workflows.pm_copilot_planning import (
    build_deliverable_alternatives,
    build_project_insights,
    build_task_breakdown,
    content_preview,
    determine_confidence,
    extract_json,
    flatten_deliverables,
    flatten_tasks,
    selected_deliverables,
)
from agentflow.application.use_cases.workflows.state_machine import (
    WorkflowDefinition,
    WorkflowNode,
)
from agentflow.application.use_cases.workflows.suggestions import (
    PM_COPILOT_WORKFLOW,
    deliverable_params,
    linked_deliverable_id,
    mark_approved,
    task_params,
    work_order_id_of,
)
from agentflow.domain.entities.agent_configuration import AgentConfigurationEntity
from agentflow.domain.entities.workflow_state import WorkflowStateEntity
from agentflow.domain.exceptions import ResourceNotFoundException
from agentflow.shared.enums import (
    AIConfidence,
    InboxItemType,
    InboxSourceType,
    PMCopilotMode,
    SuggestionType,
    Urgency,
)
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.utils.datetime import to_iso, utc_now, utc_today

logger = get_logger(__name__)

LLM_TOOL = "llm_completion"
WORK_ORDER_INFO_TOOL = "work_order_info"
CREATE_DELIVERABLE_TOOL = "create_deliverable"
CREATE_TASK_TOOL = "create_task"

PLAYBOOK_LIMIT = 5
LLM_BASE_COST = Decimal("0.01")
LLM_COST_PER_CHAR = Decimal("0.000001")


def estimate_llm_cost(context: dict[str, Any]) -> Decimal:
    """Up-front estimate used for authorization; the runner reports the actual cost."""
    size = len(json.dumps(context, default=str))
    return LLM_BASE_COST + LLM_COST_PER_CHAR * size


def pm_copilot_mode(state: WorkflowStateEntity) -> str:
    mode = state.input.get("pm_copilot_mode") or PMCopilotMode.FULL.value
    return mode if mode in PMCopilotMode.values() else PMCopilotMode.FULL.value


class PMCopilotWorkflow:
    """Node implementations for the pm_copilot workflow definition."""

    key = PM_COPILOT_WORKFLOW

    def __init__(
        self,
        *,
        context_builder: WorkOrderContextBuilder,
        playbook_repo: IPlaybookRepository,
        inbox_repo: IInboxRepository,
        config_repo: IAgentConfigurationRepository | None = None,
        tool_gateway: ToolGateway | None = None,
        validator: ISuggestionValidator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._context_builder = context_builder
        self._playbook_repo = playbook_repo
        self._inbox_repo = inbox_repo
        self._config_repo = config_repo
        self._tool_gateway = tool_gateway
        self._validator = validator
        self._clock = clock

    def definition(self) -> WorkflowDefinition:
        return WorkflowDefinition(
            self.key,
            [
                WorkflowNode("gather_context", self.gather_context),
                WorkflowNode("generate_deliverables", self.generate_deliverables),
                WorkflowNode("checkpoint_deliverables", self.checkpoint_deliverables),
                WorkflowNode("generate_task_breakdown", self.generate_task_breakdown),
                WorkflowNode("generate_insights", self.generate_insights),
                WorkflowNode("present_results", self.present_results),
            ],
        )

    # Nodes

    async def gather_context(self, state: WorkflowStateEntity) -> NodeResult:
        work_order_id = work_order_id_of(state)
        if not work_order_id:
            raise ResourceNotFoundException("WorkOrder", "")
        config = await self._config(state)

        info: dict[str, Any] | None = None
        if config is not None and self._tool_gateway is not None:
            result = await self._tool_gateway.execute(
                config,
                WORK_ORDER_INFO_TOOL,
                {"work_order_id": work_order_id},
                workflow_state_id=state.id,
            )
            if result.success:
                info = result.data
            else:
                logger.info(
                    "work_order_info unavailable for workflow state %s (%s); reading directly",
                    state.id,
                    result.error,
                )
        if not info or not info.get("work_order"):
            info = await self._context_builder.build(state.team_id, work_order_id)
        if info is None:
            raise ResourceNotFoundException("WorkOrder", work_order_id)

        work_order = info["work_order"]
        playbooks = await self._playbook_repo.list_relevant(
            state.team_id, list(work_order.get("tags") or []), PLAYBOOK_LIMIT
        )
        confidence = determine_confidence(
            work_order.get("description"), work_order.get("acceptance_criteria") or [], playbooks
        )
        context = {
            "gathered_at": to_iso(self._clock()),
            "work_order": work_order,
            "existing_deliverables": info.get("deliverables") or [],
            "existing_task_count": info.get("task_count", 0),
            "project_context": {
                "pending_tasks": info.get("pending_tasks") or [],
                "budget_hours": work_order.get("estimated_hours"),
                "actual_hours": work_order.get("actual_hours"),
            },
            "playbooks": playbooks,
        }
        return Continue({"context": context, "confidence": confidence.value})

    async def generate_deliverables(self, state: WorkflowStateEntity) -> NodeResult:
        context = state.state_data.get("context") or {}
        work_order = context.get("work_order") or {}
        playbooks = context.get("playbooks") or []

        alternatives = await self._ask_llm(
            state,
            "deliverables",
            {"work_order": work_order, "playbooks": playbooks},
            "alternatives",
        )
        source = "llm"
        if alternatives is None:
            alternatives = build_deliverable_alternatives(work_order, playbooks)
            source = "heuristic"

        return Continue(
            {
                "deliverable_alternatives": alternatives,
                "deliverable_suggestions": flatten_deliverables(alternatives),
                "deliverables_source": source,
                "deliverables_generated_at": to_iso(self._clock()),
            }
        )

    async def checkpoint_deliverables(self, state: WorkflowStateEntity) -> NodeResult:
        if pm_copilot_mode(state) != PMCopilotMode.STAGED.value:
            return Continue()
        work_order = (state.state_data.get("context") or {}).get("work_order") or {}
        suggestions = state.state_data.get("deliverable_suggestions") or []
        alternatives = state.state_data.get("deliverable_alternatives") or []
        confidence = state.state_data.get("confidence")
        return Pause(
            checkpoint="checkpoint_deliverables",
            reason="Deliverable review required",
            approval_title=f"PM Copilot: Review deliverables for {work_order.get('title')}",
            approval_preview=(
                f"{len(suggestions)} deliverable suggestion(s) across "
                f"{len(alternatives)} alternative(s) awaiting review"
            ),
            confidence=AIConfidence(confidence) if confidence in AIConfidence.values() else None,
            urgency=Urgency.NORMAL,
            work_order_id=work_order_id_of(state),
        )

    async def generate_task_breakdown(self, state: WorkflowStateEntity) -> NodeResult:
        context = state.state_data.get("context") or {}
        playbooks = context.get("playbooks") or []
        deliverables = selected_deliverables(state.state_data.get("deliverable_suggestions") or [])

        breakdown = await self._ask_llm(
            state,
            "task_breakdown",
            {
                "deliverables": [
                    {"title": d.get("title"), "description": d.get("description")}
                    for d in deliverables
                ],
                "playbooks": playbooks,
            },
            "task_breakdown",
        )
        if breakdown is None:
            breakdown = build_task_breakdown(deliverables, playbooks)

        return Continue(
            {
                "task_breakdown": breakdown,
                "task_suggestions": flatten_tasks(breakdown),
                "tasks_generated_at": to_iso(self._clock()),
            }
        )

    async def generate_insights(self, state: WorkflowStateEntity) -> NodeResult:
        context = state.state_data.get("context") or {}
        project_context = context.get("project_context") or {}

        insights = await self._ask_llm(
            state,
            "insights",
            {"project": project_context, "work_order": context.get("work_order") or {}},
            "insights",
        )
        if insights is None:
            insights = build_project_insights(project_context, utc_today(self._clock()))

        return Continue(
            {"insights": insights, "insights_generated_at": to_iso(self._clock())}
        )

    async def present_results(self, state: WorkflowStateEntity) -> NodeResult:
        data = state.state_data
        work_order = (data.get("context") or {}).get("work_order") or {}
        alternatives = data.get("deliverable_alternatives") or []
        task_suggestions = data.get("task_suggestions") or []
        insights = data.get("insights") or []

        confidence = alternatives[0].get("confidence") if alternatives else data.get("confidence")
        item = await self._inbox_repo.create(
            state.team_id,
            item_type=InboxItemType.AGENT_RESULT.value,
            source_type=InboxSourceType.AI_AGENT.value,
            source_id=state.ai_agent_id,
            title=f"PM Copilot: Plan generated for {work_order.get('title')}",
            approvable_type=APPROVABLE_TYPE,
            approvable_id=state.id,
            content_preview=content_preview(alternatives, task_suggestions),
            urgency=Urgency.NORMAL.value,
            ai_confidence=confidence if confidence in AIConfidence.values() else None,
            related_work_order_id=work_order_id_of(state),
        )
        updates: dict[str, Any] = {"results_inbox_item_id": item.id}

        if pm_copilot_mode(state) == PMCopilotMode.FULL.value:
            updates.update(await self._auto_approve(state))

        result = {
            "deliverable_alternatives": alternatives,
            "task_suggestion_count": len(task_suggestions),
            "insights": insights,
            "inbox_item_id": item.id,
            "generated_at": to_iso(self._clock()),
        }
        if "auto_approved" in updates:
            result["auto_approved"] = updates["auto_approved"]
        return Terminate(result=result, updates=updates)

    # Helpers

    async def _config(self, state: WorkflowStateEntity) -> AgentConfigurationEntity | None:
        if self._config_repo is None or not state.ai_agent_id:
            return None
        return await self._config_repo.get_for_agent(state.team_id, state.ai_agent_id)

    async def _ask_llm(
        self,
        state: WorkflowStateEntity,
        template_key: str,
        context: dict[str, Any],
        result_key: str,
    ) -> list[dict[str, Any]] | None:
        """Validated list under result_key from the LLM, or None to fall back."""
        if self._tool_gateway is None or self._tool_gateway.registry.get(LLM_TOOL) is None:
            return None
        config = await self._config(state)
        if config is None:
            return None

        result = await self._tool_gateway.execute(
            config,
            LLM_TOOL,
            {"template_key": template_key, "context": context},
            estimated_cost=estimate_llm_cost(context),
            workflow_state_id=state.id,
        )
        if not result.success:
            logger.info(
                "LLM %s unavailable for workflow state %s: %s",
                template_key,
                state.id,
                result.error,
            )
            return None

        payload = extract_json(result.data.get("text"))
        if not isinstance(payload, dict):
            logger.warning(
                "LLM %s response for workflow state %s had no JSON object", template_key, state.id
            )
            return None
        if self._validator is not None:
            errors = self._validator.validate(template_key, payload)
            if errors:
                logger.warning(
                    "LLM %s response for workflow state %s failed validation: %s",
                    template_key,
                    state.id,
                    "; ".join(errors[:3]),
                )
                return None
        value = payload.get(result_key)
        return value if isinstance(value, list) else None

    async def _auto_approve(self, state: WorkflowStateEntity) -> dict[str, Any]:
        """Create records for suggestions that clear the agent's auto-approval threshold."""
        config = await self._config(state)
        if (
            config is None
            or self._tool_gateway is None
            or config.auto_approval_threshold is None
        ):
            return {}
        threshold = config.auto_approval_threshold
        work_order_id = work_order_id_of(state)
        project_id = ((state.state_data.get("context") or {}).get("work_order") or {}).get(
            "project_id"
        )
        now = self._clock()

        deliverables = [dict(s) for s in state.state_data.get("deliverable_suggestions") or []]
        approved_deliverables = 0
        for i, suggestion in enumerate(deliverables):
            if not should_auto_approve(suggestion, threshold):
                continue
            result = await self._tool_gateway.execute(
                config,
                CREATE_DELIVERABLE_TOOL,
                deliverable_params(work_order_id, suggestion, project_id),
                workflow_state_id=state.id,
            )
            if not result.success or not result.data.get("id"):
                logger.info(
                    "Auto-approval of deliverable suggestion %d skipped: %s", i, result.error
                )
                continue
            deliverables[i] = mark_approved(
                suggestion,
                SuggestionType.DELIVERABLE.value,
                result.data["id"],
                None,
                now,
                auto=True,
            )
            approved_deliverables += 1

        linked_view = {**state.state_data, "deliverable_suggestions": deliverables}
        tasks = [dict(s) for s in state.state_data.get("task_suggestions") or []]
        approved_tasks = 0
        for i, suggestion in enumerate(tasks):
            if not should_auto_approve(suggestion, threshold):
                continue
            result = await self._tool_gateway.execute(
                config,
                CREATE_TASK_TOOL,
                task_params(
                    work_order_id, suggestion, linked_deliverable_id(linked_view, suggestion)
                ),
                workflow_state_id=state.id,
            )
            if not result.success or not result.data.get("id"):
                logger.info("Auto-approval of task suggestion %d skipped: %s", i, result.error)
                continue
            tasks[i] = mark_approved(
                suggestion, SuggestionType.TASK.value, result.data["id"], None, now, auto=True
            )
            approved_tasks += 1

        logger.info(
            "Auto-approved %d deliverable(s) and %d task(s) for workflow state %s",
            approved_deliverables,
            approved_tasks,
            state.id,
        )
        return {
            "deliverable_suggestions": deliverables,
            "task_suggestions": tasks,
            "auto_approved": {"deliverables": approved_deliverables, "tasks": approved_tasks},
        }

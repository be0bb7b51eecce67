"""Manual PM Copilot run for a work order (runs in-request)."""

from __future__ import annotations

from agentflow.application.interfaces.repositories import (
    IAgentConfigurationRepository,
    IWorkOrderRepository,
)
from agentflow.application.use_cases.workflows.registry import WorkflowRegistry
from agentflow.application.use_cases.workflows.state_machine import WorkflowRunner
from agentflow.application.use_cases.workflows.suggestions import PM_COPILOT_WORKFLOW
from agentflow.domain.entities.workflow_state import WorkflowStateEntity
from agentflow.domain.exceptions import ResourceNotFoundException
from agentflow.shared.enums import EntityType
from agentflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

PM_COPILOT_AGENT_CODE = "pm_copilot"


class StartPMCopilot:
    def __init__(
        self,
        work_order_repo: IWorkOrderRepository,
        config_repo: IAgentConfigurationRepository,
        runner: WorkflowRunner,
        registry: WorkflowRegistry,
    ) -> None:
        self._work_order_repo = work_order_repo
        self._config_repo = config_repo
        self._runner = runner
        self._registry = registry

    async def execute(
        self, team_id: str, work_order_id: str, user_id: str | None
    ) -> WorkflowStateEntity:
        """Start the workflow; returns the state after it pauses or finishes."""
        work_order = await self._work_order_repo.get_for_team(work_order_id, team_id)
        if work_order is None:
            raise ResourceNotFoundException("WorkOrder", work_order_id)
        definition = self._registry.get(PM_COPILOT_WORKFLOW)
        config = await self._config_repo.get_for_agent_code(team_id, PM_COPILOT_AGENT_CODE)
        if config is None:
            logger.info(
                "No PM Copilot configuration for team %s; running without agent tools", team_id
            )

        return await self._runner.start(
            definition,
            team_id=team_id,
            input_data={
                "work_order_id": work_order.id,
                "team_id": team_id,
                "pm_copilot_mode": work_order.pm_copilot_mode,
                "triggered_by": {"user_id": user_id, "manual": True},
            },
            ai_agent_id=config.ai_agent_id if config else None,
            subject_type=EntityType.WORK_ORDER.value,
            subject_id=work_order.id,
        )

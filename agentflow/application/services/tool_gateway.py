"""Tool gateway: the only path through which workflow nodes call agent tools.

Per call: resolve tool, authorize (permissions + budget), execute, debit
the actual cost on success, append an activity-log row. The tool runs inside
a savepoint. Denials and tool errors come back as ToolResult values; nothing
is raised to the node.
"""

from __future__ import annotations

import time
from contextlib import nullcontext
from decimal import Decimal
from typing import Any

from agentflow.application.dtos.tool import ToolResult
from agentflow.application.interfaces.repositories import IActivityLogRepository
from agentflow.application.interfaces.services import SavepointFactory
from agentflow.application.services.budget_gateway import BudgetGateway
from agentflow.application.services.tool_registry import ToolRegistry
from agentflow.domain.entities.agent_configuration import AgentConfigurationEntity
from agentflow.shared.enums import ActivityStatus
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)

# Keys never copied into the activity log input summary.
_REDACTED_PARAMS = frozenset({"prompt", "system_prompt", "api_key"})


def _summarize(params: dict[str, Any]) -> dict[str, Any]:
    summary: dict[str, Any] = {}
    for key, value in params.items():
        if key in _REDACTED_PARAMS:
            summary[key] = f"<{len(str(value))} chars>"
        elif isinstance(value, (str, int, float, bool)) or value is None:
            summary[key] = value
        else:
            summary[key] = type(value).__name__
    return summary


class ToolGateway:
    """Executes registered tools on behalf of an agent configuration."""

    def __init__(
        self,
        registry: ToolRegistry,
        budget_gateway: BudgetGateway,
        activity_log: IActivityLogRepository,
        savepoint: SavepointFactory = nullcontext,
    ) -> None:
        self.registry = registry
        self._budget = budget_gateway
        self._activity_log = activity_log
        self._savepoint = savepoint

    @traced("tool_gateway.execute")
    async def execute(
        self,
        config: AgentConfigurationEntity,
        tool_name: str,
        params: dict[str, Any] | None = None,
        *,
        estimated_cost: Decimal | float = Decimal("0"),
        workflow_state_id: str | None = None,
    ) -> ToolResult:
        """Run one tool call through permission, budget and logging."""
        params = params or {}
        summary = _summarize(params)
        tool = self.registry.get(tool_name)
        if tool is None:
            logger.warning("Unknown tool '%s' requested (team_id=%s)", tool_name, config.team_id)
            return ToolResult.failure(f"Tool not found: {tool_name}")

        decision = self._budget.authorize(
            config,
            tool_name,
            estimated_cost,
            required_permissions=self.registry.required_permissions(tool),
        )
        if not decision.allowed:
            logger.info(
                "Tool '%s' denied for agent configuration %s: %s",
                tool_name,
                config.id,
                decision.reason,
            )
            await self._activity_log.record(
                config.team_id,
                config.id,
                tool_name,
                ActivityStatus.DENIED.value,
                input_summary=summary,
                error=decision.reason,
                workflow_state_id=workflow_state_id,
            )
            return ToolResult.refused(decision.reason, decision.code)

        started = time.monotonic()
        try:
            # Rolled back alone on failure; the log write below still runs.
            async with self._savepoint():
                output = await tool.execute(config.team_id, params)
        except Exception as e:
            logger.exception(
                "Tool '%s' failed (team_id=%s, workflow_state_id=%s)",
                tool_name,
                config.team_id,
                workflow_state_id,
            )
            await self._activity_log.record(
                config.team_id,
                config.id,
                tool_name,
                ActivityStatus.FAILED.value,
                duration_ms=int((time.monotonic() - started) * 1000),
                input_summary=summary,
                error=str(e),
                workflow_state_id=workflow_state_id,
            )
            return ToolResult.failure(str(e))

        duration_ms = int((time.monotonic() - started) * 1000)
        await self._budget.record_spend(config, output.cost)
        await self._activity_log.record(
            config.team_id,
            config.id,
            tool_name,
            ActivityStatus.SUCCESS.value,
            cost=output.cost,
            duration_ms=duration_ms,
            input_summary=summary,
            workflow_state_id=workflow_state_id,
        )
        add_span_attributes(tool_cost=float(output.cost), tool_duration_ms=duration_ms)
        return ToolResult.ok(output)

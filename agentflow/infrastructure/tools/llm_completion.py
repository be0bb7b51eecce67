"""llm_completion: render a prompt template and call the LLM runner."""

from __future__ import annotations

from typing import Any

from agentflow.application.dtos.tool import ToolOutput
from agentflow.application.interfaces.services import IAgentRunner, IPromptRenderer
from agentflow.domain.exceptions import ValidationException
from agentflow.shared.enums import ToolCategory


class LLMCompletionTool:
    name = "llm_completion"
    category = ToolCategory.CONTEXT
    description = "Complete a named prompt template; cost is the runner's reported token cost."

    def __init__(self, runner: IAgentRunner, renderer: IPromptRenderer) -> None:
        self._runner = runner
        self._renderer = renderer

    async def execute(self, team_id: str, params: dict[str, Any]) -> ToolOutput:
        template_key = params.get("template_key")
        if not template_key:
            raise ValidationException("template_key is required", field="template_key")
        system_prompt, prompt = self._renderer.render(
            str(template_key), dict(params.get("context") or {})
        )
        completion = await self._runner.complete(system_prompt, prompt)
        return ToolOutput(
            data={
                "text": completion.text,
                "tokens_used": completion.tokens_used,
                "model": completion.model,
            },
            cost=completion.cost,
        )

"""Service interfaces (Protocols) for the application layer."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from agentflow.application.dtos.tool import LLMCompletion, ToolOutput
    from agentflow.application.dtos.trigger import ChainTriggerJob
    from agentflow.shared.enums import ToolCategory

# Opens a savepoint: a failure inside rolls back only that block and leaves
# the surrounding transaction usable (AsyncSession.begin_nested in production).
SavepointFactory = Callable[[], AbstractAsyncContextManager[Any]]


class IJobQueue(Protocol):
    """Queue of chain-trigger jobs between dispatch and the worker."""

    async def enqueue(self, job: "ChainTriggerJob") -> None:
        """Push a job; raises QueueUnavailableException when the broker is unreachable."""

    async def dequeue(self, timeout_seconds: int) -> "ChainTriggerJob | None":
        """Pop the next ready job, waiting up to timeout_seconds."""

    async def schedule_retry(self, job: "ChainTriggerJob", delay_seconds: int) -> None:
        """Re-enqueue job after delay_seconds."""


class IAgentRunner(Protocol):
    """LLM completion endpoint used by workflow nodes."""

    async def complete(
        self, system_prompt: str, prompt: str, *, max_tokens: int | None = None
    ) -> "LLMCompletion":
        """Return the completion; raises LLMRunnerException on transport or API errors."""


class IAgentTool(Protocol):
    """A named operation an agent can call through the tool gateway."""

    name: str
    category: "ToolCategory"
    description: str

    async def execute(self, team_id: str, params: dict[str, Any]) -> "ToolOutput":
        """Run the tool; exceptions are caught and logged by the gateway."""


class IPromptRenderer(Protocol):
    """Renders (system, user) prompts for a template key."""

    def render(self, template_key: str, context: dict[str, Any]) -> tuple[str, str]:
        """Raises KeyError for an unknown template key."""


class ISuggestionValidator(Protocol):
    """Validates LLM JSON output against the schema for a template key."""

    def validate(self, template_key: str, payload: Any) -> list[str]:
        """Return validation error messages (empty when valid)."""

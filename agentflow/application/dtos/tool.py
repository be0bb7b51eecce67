"""DTOs for agent tool execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class ToolOutput:
    """What a tool returns: data plus the actual cost it incurred."""

    data: dict[str, Any] = field(default_factory=dict)
    cost: Decimal = Decimal("0")


@dataclass(frozen=True)
class ToolResult:
    """Outcome of ToolGateway.execute as seen by the calling workflow node."""

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    denied: bool = False
    deny_code: str | None = None
    cost: Decimal = Decimal("0")

    @classmethod
    def ok(cls, output: ToolOutput) -> ToolResult:
        return cls(success=True, data=output.data, cost=output.cost)

    @classmethod
    def failure(cls, error: str) -> ToolResult:
        return cls(success=False, error=error)

    @classmethod
    def refused(cls, reason: str, code: str) -> ToolResult:
        return cls(success=False, error=reason, denied=True, deny_code=code)


@dataclass(frozen=True)
class LLMCompletion:
    """Text returned by the LLM runner with its token usage and cost."""

    text: str
    tokens_used: int = 0
    cost: Decimal = Decimal("0")
    model: str | None = None

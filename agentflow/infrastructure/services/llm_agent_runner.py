"""LLM runner over an OpenAI-compatible chat completions endpoint (implements IAgentRunner).

All HTTP calls use httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import httpx

from agentflow.application.dtos.tool import LLMCompletion
from agentflow.core.config import Settings
from agentflow.domain.exceptions import LLMRunnerException
from agentflow.shared.telemetry.logging import get_logger
from agentflow.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)

COST_PER_1K_TOKENS = Decimal("0.01")


def completion_cost(tokens_used: int) -> Decimal:
    return (Decimal(tokens_used) / 1000 * COST_PER_1K_TOKENS).quantize(Decimal("0.0001"))


class HttpAgentRunner:
    """Calls POST {base_url}/chat/completions and reports token usage as cost."""

    def __init__(
        self,
        base_url: str,
        model: str,
        *,
        api_key: str | None = None,
        timeout_seconds: float = 60.0,
        max_tokens: int = 2048,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = base_url.rstrip("/") + "/chat/completions"
        self._model = model
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._max_tokens = max_tokens
        self._client = client

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient | None = None
    ) -> HttpAgentRunner:
        return cls(
            settings.llm_base_url or "",
            settings.llm_model,
            api_key=settings.llm_api_key.get_secret_value() if settings.llm_api_key else None,
            timeout_seconds=settings.llm_timeout_seconds,
            max_tokens=settings.llm_max_tokens,
            client=client,
        )

    @traced("llm_runner.complete")
    async def complete(
        self, system_prompt: str, prompt: str, *, max_tokens: int | None = None
    ) -> LLMCompletion:
        body = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens or self._max_tokens,
            "temperature": 0.2,
        }
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            if self._client is not None:
                resp = await self._client.post(
                    self._url, json=body, headers=headers, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.post(self._url, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("LLM request to %s failed: %s", self._url, e)
            raise LLMRunnerException(f"LLM request failed: {e}") from e

        if resp.status_code != 200:
            logger.warning("LLM endpoint returned HTTP %s", resp.status_code)
            raise LLMRunnerException(
                f"LLM endpoint returned HTTP {resp.status_code}", status_code=resp.status_code
            )
        return self._parse(resp)

    def _parse(self, resp: httpx.Response) -> LLMCompletion:
        try:
            data: dict[str, Any] = resp.json()
            text = data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMRunnerException("LLM response had no completion text") from e
        usage = data.get("usage") or {}
        tokens = int(usage.get("total_tokens") or 0)
        add_span_attributes(llm_tokens=tokens)
        return LLMCompletion(
            text=text,
            tokens_used=tokens,
            cost=completion_cost(tokens),
            model=data.get("model") or self._model,
        )

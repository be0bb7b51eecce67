"""Unit tests for HttpAgentRunner using httpx.MockTransport (no network)."""

import json
from decimal import Decimal

import httpx
import pytest

from agentflow.domain.exceptions import LLMRunnerException
from agentflow.infrastructure.services import HttpAgentRunner, completion_cost


def _runner(handler, **kwargs) -> HttpAgentRunner:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpAgentRunner("https://llm.example.com/v1/", "test-model", client=client, **kwargs)


async def test_complete_posts_chat_request_and_parses_usage() -> None:
    """The request carries both prompts and the key; cost comes from total_tokens."""
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "model": "test-model-2026",
                "choices": [{"message": {"role": "assistant", "content": "{\"ok\": true}"}}],
                "usage": {"total_tokens": 1500},
            },
        )

    completion = await _runner(handler, api_key="sk-test", max_tokens=512).complete(
        "system text", "user text"
    )

    assert captured["url"] == "https://llm.example.com/v1/chat/completions"
    assert captured["auth"] == "Bearer sk-test"
    assert [m["content"] for m in captured["body"]["messages"]] == ["system text", "user text"]
    assert captured["body"]["max_tokens"] == 512
    assert completion.text == '{"ok": true}'
    assert completion.tokens_used == 1500
    assert completion.cost == Decimal("0.0150")
    assert completion.model == "test-model-2026"


async def test_non_200_raises_runner_exception() -> None:
    """HTTP errors from the endpoint become LLMRunnerException with the status."""
    runner = _runner(lambda request: httpx.Response(429, json={"error": "rate limited"}))
    with pytest.raises(LLMRunnerException) as exc_info:
        await runner.complete("s", "p")
    assert exc_info.value.details == {"status_code": 429}


async def test_transport_error_raises_runner_exception() -> None:
    """Connection failures are wrapped, not leaked as httpx errors."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LLMRunnerException):
        await _runner(handler).complete("s", "p")


async def test_response_without_choices_raises() -> None:
    """A 200 without completion text is unusable."""
    runner = _runner(lambda request: httpx.Response(200, json={"choices": []}))
    with pytest.raises(LLMRunnerException):
        await runner.complete("s", "p")


def test_completion_cost_per_thousand_tokens() -> None:
    """Cost is 0.01 per 1k tokens, rounded to four places."""
    assert completion_cost(0) == Decimal("0")
    assert completion_cost(1000) == Decimal("0.0100")
    assert completion_cost(123) == Decimal("0.0012")

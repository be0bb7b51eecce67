"""API tests for status change notifications."""

from datetime import UTC, datetime

from httpx import AsyncClient

from agentflow.api.v1.dependencies import get_status_change_handler
from agentflow.application.use_cases.triggers import (
    DispatchPipeline,
    StatusChangeHandler,
    TriggerMatcher,
)
from agentflow.domain.exceptions import QueueUnavailableException
from tests.conftest import TEAM_HEADERS
from tests.fakes import (
    FakeEntityReader,
    FakeJobQueue,
    FakeTriggerRepository,
    make_snapshot,
    make_trigger,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)
CHANGE = {
    "entity_type": "work_order",
    "entity_id": "wo1",
    "from_status": "draft",
    "to_status": "approved",
}


def _handler(triggers):
    repo = FakeTriggerRepository(triggers)
    queue = FakeJobQueue()
    handler = StatusChangeHandler(
        FakeEntityReader([make_snapshot()]),
        TriggerMatcher(repo, clock=lambda: NOW),
        DispatchPipeline(repo, queue, clock=lambda: NOW),
    )
    return handler, queue


async def test_matching_trigger_is_dispatched(client: AsyncClient, override) -> None:
    """The response lists dispatched trigger ids; the job carries the acting user."""
    handler, queue = _handler([make_trigger("a")])
    override(get_status_change_handler, lambda: handler)

    response = await client.post("/api/v1/status-changes", headers=TEAM_HEADERS, json=CHANGE)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "dispatched": ["a"],
        "suppressed": [],
        "failed": [],
    }
    assert queue.jobs[0].acting_user_id == "u1"


async def test_repeat_change_is_suppressed(client: AsyncClient, override) -> None:
    """Within the dedup window the same trigger is not dispatched twice."""
    handler, queue = _handler([make_trigger("a")])
    override(get_status_change_handler, lambda: handler)
    await client.post("/api/v1/status-changes", headers=TEAM_HEADERS, json=CHANGE)

    response = await client.post("/api/v1/status-changes", headers=TEAM_HEADERS, json=CHANGE)

    assert response.json()["dispatched"] == []
    assert len(queue.jobs) == 1


async def test_unknown_entity_type_is_422(client: AsyncClient, override) -> None:
    handler, _ = _handler([])
    override(get_status_change_handler, lambda: handler)
    response = await client.post(
        "/api/v1/status-changes",
        headers=TEAM_HEADERS,
        json={**CHANGE, "entity_type": "invoice"},
    )
    assert response.status_code == 422


async def test_queue_unavailable_is_503(client: AsyncClient, override) -> None:
    """Without a connected queue the route answers 503."""

    def _no_queue():
        raise QueueUnavailableException("Job queue is not connected")

    override(get_status_change_handler, _no_queue)

    response = await client.post("/api/v1/status-changes", headers=TEAM_HEADERS, json=CHANGE)

    assert response.status_code == 503
    assert response.json()["error"] == "QUEUE_UNAVAILABLE"

"""API tests for per-suggestion approve/reject."""

import pytest
from httpx import AsyncClient

from agentflow.api.v1.dependencies import get_suggestion_service
from tests.conftest import TEAM_HEADERS


@pytest.fixture
async def paused_run(override, pm_copilot):
    """Staged run paused at the deliverables checkpoint: (harness, inbox item id)."""
    h = pm_copilot(mode="staged")
    state = await h.start.execute("t1", "wo1", "u1")
    override(get_suggestion_service, lambda: h.suggestions)
    return h, state.state_data["inbox_item_id"]


async def test_approve_creates_deliverable(client: AsyncClient, paused_run) -> None:
    """Approving a deliverable suggestion returns the created record id."""
    h, item_id = paused_run

    response = await client.post(
        f"/api/v1/pm-copilot/suggestions/{item_id}/approve",
        headers=TEAM_HEADERS,
        json={"suggestion_type": "deliverable", "suggestion_index": 0},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Suggestion approved",
        "created_id": h.deliverables.created[0].id,
    }


async def test_second_approval_conflicts(client: AsyncClient, paused_run) -> None:
    """A resolved suggestion returns 409 and creates nothing more."""
    h, item_id = paused_run
    url = f"/api/v1/pm-copilot/suggestions/{item_id}/approve"
    body = {"suggestion_type": "deliverable", "suggestion_index": 1}
    await client.post(url, headers=TEAM_HEADERS, json=body)

    response = await client.post(url, headers=TEAM_HEADERS, json=body)

    assert response.status_code == 409
    assert response.json()["error"] == "SUGGESTION_ALREADY_RESOLVED"
    assert len(h.deliverables.created) == 1


async def test_index_out_of_range_is_404(client: AsyncClient, paused_run) -> None:
    _, item_id = paused_run
    response = await client.post(
        f"/api/v1/pm-copilot/suggestions/{item_id}/approve",
        headers=TEAM_HEADERS,
        json={"suggestion_type": "deliverable", "suggestion_index": 9},
    )
    assert response.status_code == 404
    assert response.json()["error"] == "SUGGESTION_NOT_FOUND"


async def test_unknown_suggestion_type_is_422(client: AsyncClient, paused_run) -> None:
    _, item_id = paused_run
    response = await client.post(
        f"/api/v1/pm-copilot/suggestions/{item_id}/approve",
        headers=TEAM_HEADERS,
        json={"suggestion_type": "milestone", "suggestion_index": 0},
    )
    assert response.status_code == 422


async def test_reject_marks_suggestion(client: AsyncClient, paused_run) -> None:
    """Rejecting stores the reason and creates no record."""
    h, item_id = paused_run

    response = await client.post(
        f"/api/v1/pm-copilot/suggestions/{item_id}/reject",
        headers=TEAM_HEADERS,
        json={"suggestion_type": "deliverable", "suggestion_index": 2, "reason": "Out of scope"},
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Suggestion rejected"
    assert h.deliverables.created == []
    [state] = h.states.states.values()
    rejected = state.state_data["deliverable_suggestions"][2]
    assert rejected["status"] == "rejected"
    assert rejected["rejection_reason"] == "Out of scope"


async def test_unknown_inbox_item_is_404(client: AsyncClient, paused_run) -> None:
    response = await client.post(
        "/api/v1/pm-copilot/suggestions/nope/reject",
        headers=TEAM_HEADERS,
        json={"suggestion_type": "task", "suggestion_index": 0},
    )
    assert response.status_code == 404

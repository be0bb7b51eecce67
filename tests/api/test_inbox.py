"""API tests for whole-workflow approve/reject through the inbox."""

import pytest
from httpx import AsyncClient

from agentflow.api.v1.dependencies import get_inbox_decision_handler
from tests.conftest import TEAM_HEADERS


@pytest.fixture
async def paused_run(override, pm_copilot):
    h = pm_copilot(mode="staged")
    state = await h.start.execute("t1", "wo1", "u1")
    override(get_inbox_decision_handler, lambda: h.decisions)
    return h, state.id, state.state_data["inbox_item_id"]


async def test_approve_resumes_workflow(client: AsyncClient, paused_run) -> None:
    """Approving the checkpoint item runs task planning to completion."""
    h, state_id, item_id = paused_run

    response = await client.post(f"/api/v1/inbox/{item_id}/approve", headers=TEAM_HEADERS)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "workflow_state_id": state_id,
        "status": "completed",
    }
    assert h.inbox.items[item_id].approved_at is not None


async def test_reject_with_reason(client: AsyncClient, paused_run) -> None:
    h, state_id, item_id = paused_run

    response = await client.post(
        f"/api/v1/inbox/{item_id}/reject", headers=TEAM_HEADERS, json={"reason": "Not now"}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "rejected"
    assert h.inbox.rejection_reasons[item_id] == "Not now"


async def test_reject_without_body(client: AsyncClient, paused_run) -> None:
    """The reject body is optional."""
    h, _, item_id = paused_run

    response = await client.post(f"/api/v1/inbox/{item_id}/reject", headers=TEAM_HEADERS)

    assert response.status_code == 200
    assert h.inbox.rejection_reasons[item_id] is None


async def test_second_decision_conflicts(client: AsyncClient, paused_run) -> None:
    _, _, item_id = paused_run
    await client.post(f"/api/v1/inbox/{item_id}/approve", headers=TEAM_HEADERS)

    response = await client.post(f"/api/v1/inbox/{item_id}/reject", headers=TEAM_HEADERS)

    assert response.status_code == 409
    assert response.json()["error"] == "WORKFLOW_STATE_CONFLICT"


async def test_item_of_other_team_is_404(client: AsyncClient, paused_run) -> None:
    _, _, item_id = paused_run
    response = await client.post(
        f"/api/v1/inbox/{item_id}/approve", headers={"X-Team-ID": "t2"}
    )
    assert response.status_code == 404

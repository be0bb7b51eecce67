"""FastAPI dependencies for v1 routes."""

from agentflow.api.v1.dependencies.scope import (
    get_team_id,
    get_user_id,
    is_valid_team_id_format,
    require_internal_token,
)
from agentflow.api.v1.dependencies.services import (
    get_container,
    get_inbox_decision_handler,
    get_read_container,
    get_reset_agent_spend,
    get_start_pm_copilot,
    get_status_change_handler,
    get_suggestion_reader,
    get_suggestion_service,
    get_work_order_repo_for_write,
)

__all__ = [
    "get_container",
    "get_inbox_decision_handler",
    "get_read_container",
    "get_reset_agent_spend",
    "get_start_pm_copilot",
    "get_status_change_handler",
    "get_suggestion_reader",
    "get_suggestion_service",
    "get_team_id",
    "get_user_id",
    "get_work_order_repo_for_write",
    "is_valid_team_id_format",
    "require_internal_token",
]

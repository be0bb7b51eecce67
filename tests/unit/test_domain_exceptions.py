"""Unit tests for domain exceptions (error codes and serialization)."""

from agentflow.domain.exceptions import (
    AgentFlowException,
    LLMRunnerException,
    QueueUnavailableException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    SuggestionAlreadyResolvedException,
    SuggestionNotFoundException,
    ValidationException,
    WorkflowNotRegisteredException,
    WorkflowStateException,
)


def test_base_exception_defaults_error_code_to_class_name() -> None:
    exc = AgentFlowException("boom")
    assert exc.error_code == "AgentFlowException"
    assert exc.to_dict() == {
        "success": False,
        "error": "AgentFlowException",
        "message": "boom",
        "details": {},
    }


def test_validation_exception_carries_field() -> None:
    exc = ValidationException("bad", field="entity_type")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "entity_type"}
    assert ValidationException("bad").details == {}


def test_not_found_message_and_details() -> None:
    exc = ResourceNotFoundException("WorkOrder", "wo1")
    assert exc.message == "WorkOrder not found: wo1"
    assert exc.details == {"resource_type": "WorkOrder", "resource_id": "wo1"}


def test_workflow_errors() -> None:
    conflict = WorkflowStateException("s1", "completed", "resume")
    assert conflict.error_code == "WORKFLOW_STATE_CONFLICT"
    assert conflict.message == "Cannot resume workflow s1 in status 'completed'"
    assert WorkflowNotRegisteredException("x").details == {"workflow_class": "x"}


def test_suggestion_errors() -> None:
    assert SuggestionNotFoundException("task", 4).error_code == "SUGGESTION_NOT_FOUND"
    resolved = SuggestionAlreadyResolvedException("deliverable", 0, "approved")
    assert resolved.error_code == "SUGGESTION_ALREADY_RESOLVED"
    assert resolved.details["status"] == "approved"


def test_infrastructure_errors() -> None:
    assert SqlNotConfiguredException().error_code == "SERVICE_UNAVAILABLE"
    assert QueueUnavailableException().message == "Job queue unavailable"
    assert LLMRunnerException("down", status_code=503).details == {"status_code": 503}
    assert isinstance(LLMRunnerException("down"), AgentFlowException)

"""Domain exceptions for agentflow.

Business-rule and configuration failures raised by the domain and
application layers. The presentation layer maps them to HTTP responses
in agentflow.core.exception_handlers; the worker logs them.

Budget and permission denials are NOT exceptions: the gateway returns a
typed Deny value so callers can skip a tool call and continue.
"""

from typing import Any


class AgentFlowException(Exception):
    """Base exception for all agentflow errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "success": False,
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AgentFlowException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(AgentFlowException):
    """Raised when a requested resource does not exist (or is outside the team)."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class WorkflowStateException(AgentFlowException):
    """Raised on an illegal workflow transition (e.g. resuming a running workflow)."""

    def __init__(self, workflow_state_id: str, status: str, action: str) -> None:
        super().__init__(
            f"Cannot {action} workflow {workflow_state_id} in status '{status}'",
            "WORKFLOW_STATE_CONFLICT",
            {"workflow_state_id": workflow_state_id, "status": status, "action": action},
        )


class WorkflowNotRegisteredException(AgentFlowException):
    """Raised when a chain or state references an unknown workflow class."""

    def __init__(self, workflow_class: str) -> None:
        super().__init__(
            f"No workflow registered for '{workflow_class}'",
            "WORKFLOW_NOT_REGISTERED",
            {"workflow_class": workflow_class},
        )


class SuggestionNotFoundException(AgentFlowException):
    """Raised when a suggestion index is outside the stored suggestion list."""

    def __init__(self, suggestion_type: str, index: int) -> None:
        super().__init__(
            f"No {suggestion_type} suggestion at index {index}",
            "SUGGESTION_NOT_FOUND",
            {"suggestion_type": suggestion_type, "suggestion_index": index},
        )


class SuggestionAlreadyResolvedException(AgentFlowException):
    """Raised when approving or rejecting a suggestion that is no longer pending."""

    def __init__(self, suggestion_type: str, index: int, status: str) -> None:
        super().__init__(
            f"The {suggestion_type} suggestion at index {index} is already {status}",
            "SUGGESTION_ALREADY_RESOLVED",
            {"suggestion_type": suggestion_type, "suggestion_index": index, "status": status},
        )


class SqlNotConfiguredException(AgentFlowException):
    """Raised when an operation needs Postgres but DATABASE_URL is unset."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class QueueUnavailableException(AgentFlowException):
    """Raised when a job cannot be enqueued (broker down or not connected)."""

    def __init__(self, message: str = "Job queue unavailable") -> None:
        super().__init__(message, "QUEUE_UNAVAILABLE")


class LLMRunnerException(AgentFlowException):
    """Raised when the LLM endpoint fails or returns an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, "LLM_RUNNER_ERROR", details)

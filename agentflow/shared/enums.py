"""Shared enumerations for agentflow.

Enums used by the domain, persistence CHECK constraints and API schemas.
All are str Enums so values round-trip through JSON and the database
unchanged.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class EntityType(_ValuesMixin, str, Enum):
    """Trackable entity types whose status transitions can fire triggers."""

    WORK_ORDER = "work_order"
    TASK = "task"
    DELIVERABLE = "deliverable"


class WorkflowStatus(_ValuesMixin, str, Enum):
    """Lifecycle of a persisted workflow state."""

    RUNNING = "running"
    PAUSED = "paused"
    REJECTED = "rejected"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (
            WorkflowStatus.REJECTED,
            WorkflowStatus.COMPLETED,
            WorkflowStatus.FAILED,
        )


class ChainExecutionStatus(_ValuesMixin, str, Enum):
    """Outcome of handing one trigger firing to its chain."""

    STARTED = "started"
    DROPPED = "dropped"


class PMCopilotMode(_ValuesMixin, str, Enum):
    """Full runs deliverables then tasks back-to-back; staged pauses in between."""

    STAGED = "staged"
    FULL = "full"


class SuggestionType(_ValuesMixin, str, Enum):
    """Kinds of suggestion a PM Copilot run produces."""

    DELIVERABLE = "deliverable"
    TASK = "task"


class SuggestionStatus(_ValuesMixin, str, Enum):
    """Per-suggestion resolution marker kept inside state_data."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AIConfidence(_ValuesMixin, str, Enum):
    """Confidence level attached to generated plans and inbox items."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InboxItemType(_ValuesMixin, str, Enum):
    """Inbox item kinds created by this service."""

    APPROVAL = "approval"
    AGENT_RESULT = "agent_result"


class InboxSourceType(_ValuesMixin, str, Enum):
    """Who created the inbox item."""

    AI_AGENT = "ai_agent"
    SYSTEM = "system"


class Urgency(_ValuesMixin, str, Enum):
    """Urgency of an inbox item."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class ToolCategory(_ValuesMixin, str, Enum):
    """Tool categories; each non-context category maps to one permission flag."""

    CONTEXT = "context"
    TASKS = "tasks"
    WORK_ORDERS = "work_orders"
    CLIENT_DATA = "client_data"
    EMAIL = "email"
    DELIVERABLES = "deliverables"
    FINANCIAL = "financial"
    PLAYBOOKS = "playbooks"


class ActivityStatus(_ValuesMixin, str, Enum):
    """Outcome recorded in the agent activity log."""

    SUCCESS = "success"
    DENIED = "denied"
    FAILED = "failed"


class DeliverableStatus(_ValuesMixin, str, Enum):
    """Status of deliverables created from approved suggestions."""

    DRAFT = "draft"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    DELIVERED = "delivered"


class TaskStatus(_ValuesMixin, str, Enum):
    """Status of tasks created from approved suggestions."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DONE = "done"

"""SQLAlchemy ORM models. Importing this package registers every table on Base.metadata."""

from agentflow.infrastructure.persistence.models.agent import (
    AgentActivityLog,
    AgentConfiguration,
    AIAgent,
)
from agentflow.infrastructure.persistence.models.inbox import InboxItem
from agentflow.infrastructure.persistence.models.trigger import (
    AgentChain,
    AgentChainExecution,
    AgentTrigger,
)
from agentflow.infrastructure.persistence.models.work import (
    Deliverable,
    Playbook,
    Task,
    WorkOrder,
)
from agentflow.infrastructure.persistence.models.workflow_state import AgentWorkflowState

__all__ = [
    "AIAgent",
    "AgentActivityLog",
    "AgentChain",
    "AgentChainExecution",
    "AgentConfiguration",
    "AgentTrigger",
    "AgentWorkflowState",
    "Deliverable",
    "InboxItem",
    "Playbook",
    "Task",
    "WorkOrder",
]

"""Repositories: SQLAlchemy implementations of the application repository protocols."""

from agentflow.infrastructure.persistence.repositories.activity_log_repo import (
    ActivityLogRepository,
)
from agentflow.infrastructure.persistence.repositories.agent_configuration_repo import (
    AgentConfigurationRepository,
)
from agentflow.infrastructure.persistence.repositories.chain_execution_repo import (
    ChainExecutionRepository,
)
from agentflow.infrastructure.persistence.repositories.deliverable_repo import (
    DeliverableRepository,
)
from agentflow.infrastructure.persistence.repositories.inbox_repo import InboxRepository
from agentflow.infrastructure.persistence.repositories.playbook_repo import PlaybookRepository
from agentflow.infrastructure.persistence.repositories.task_repo import TaskRepository
from agentflow.infrastructure.persistence.repositories.trigger_repo import TriggerRepository
from agentflow.infrastructure.persistence.repositories.work_order_repo import (
    WorkOrderRepository,
)
from agentflow.infrastructure.persistence.repositories.workflow_state_repo import (
    WorkflowStateRepository,
)

__all__ = [
    "ActivityLogRepository",
    "AgentConfigurationRepository",
    "ChainExecutionRepository",
    "DeliverableRepository",
    "InboxRepository",
    "PlaybookRepository",
    "TaskRepository",
    "TriggerRepository",
    "WorkOrderRepository",
    "WorkflowStateRepository",
]

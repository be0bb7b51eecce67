"""Domain entities (plain dataclasses, no ORM dependency)."""

from agentflow.domain.entities.agent_configuration import (
    PERMISSION_FLAGS,
    AgentConfigurationEntity,
)
from agentflow.domain.entities.entity_snapshot import (
    MISSING,
    EntitySnapshot,
    HasStatusField,
    HasTeamId,
)
from agentflow.domain.entities.trigger import ChainEntity, ChainExecutionEntity, TriggerEntity
from agentflow.domain.entities.workflow_state import (
    COMPLETED_NODE,
    START_NODE,
    WorkflowStateEntity,
)

__all__ = [
    "PERMISSION_FLAGS",
    "AgentConfigurationEntity",
    "MISSING",
    "EntitySnapshot",
    "HasStatusField",
    "HasTeamId",
    "ChainEntity",
    "ChainExecutionEntity",
    "TriggerEntity",
    "COMPLETED_NODE",
    "START_NODE",
    "WorkflowStateEntity",
]

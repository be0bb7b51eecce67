"""Application interfaces (Protocols) implemented by infrastructure."""

from agentflow.application.interfaces.repositories import (
    IActivityLogRepository,
    IChainExecutionRepository,
    IAgentConfigurationRepository,
    IDeliverableRepository,
    IEntityReader,
    IInboxRepository,
    IPlaybookRepository,
    ITaskRepository,
    ITriggerRepository,
    IWorkflowStateRepository,
    IWorkOrderRepository,
)
from agentflow.application.interfaces.services import (
    IAgentRunner,
    IAgentTool,
    IJobQueue,
    IPromptRenderer,
    ISuggestionValidator,
    SavepointFactory,
)

__all__ = [
    "IActivityLogRepository",
    "IChainExecutionRepository",
    "IAgentConfigurationRepository",
    "IDeliverableRepository",
    "IEntityReader",
    "IInboxRepository",
    "IPlaybookRepository",
    "ITaskRepository",
    "ITriggerRepository",
    "IWorkflowStateRepository",
    "IWorkOrderRepository",
    "IAgentRunner",
    "IAgentTool",
    "IJobQueue",
    "IPromptRenderer",
    "ISuggestionValidator",
    "SavepointFactory",
]

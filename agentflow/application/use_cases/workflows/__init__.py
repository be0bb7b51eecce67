"""Workflow state machine, approvals and the PM Copilot workflow."""

from agentflow.application.use_cases.workflows.approval import (
    ApprovalService,
    InboxDecisionHandler,
)
from agentflow.application.use_cases.workflows.pm_copilot import PMCopilotWorkflow
from agentflow.application.use_cases.workflows.registry import WorkflowRegistry
from agentflow.application.use_cases.workflows.start_pm_copilot import StartPMCopilot
from agentflow.application.use_cases.workflows.state_machine import (
    WorkflowDefinition,
    WorkflowNode,
    WorkflowRunner,
)
from agentflow.application.use_cases.workflows.suggestions import SuggestionService

__all__ = [
    "ApprovalService",
    "InboxDecisionHandler",
    "PMCopilotWorkflow",
    "StartPMCopilot",
    "SuggestionService",
    "WorkflowDefinition",
    "WorkflowNode",
    "WorkflowRegistry",
    "WorkflowRunner",
]

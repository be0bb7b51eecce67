"""Registry of workflow definitions keyed by workflow_class."""

from __future__ import annotations

from agentflow.application.use_cases.workflows.state_machine import WorkflowDefinition
from agentflow.domain.exceptions import WorkflowNotRegisteredException


class WorkflowRegistry:
    def __init__(self, definitions: list[WorkflowDefinition] | None = None) -> None:
        self._definitions: dict[str, WorkflowDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: WorkflowDefinition) -> None:
        self._definitions[definition.key] = definition

    def get(self, workflow_class: str) -> WorkflowDefinition:
        """Definition for the key; an unknown key is a configuration error."""
        try:
            return self._definitions[workflow_class]
        except KeyError:
            raise WorkflowNotRegisteredException(workflow_class) from None

    def __contains__(self, workflow_class: str) -> bool:
        return workflow_class in self._definitions

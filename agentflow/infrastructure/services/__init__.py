"""Infrastructure services: LLM runner, prompt rendering and entity reads."""

from agentflow.infrastructure.services.entity_reader import SqlEntityReader
from agentflow.infrastructure.services.llm_agent_runner import HttpAgentRunner, completion_cost
from agentflow.infrastructure.services.prompt_renderer import PromptRenderer

__all__ = ["HttpAgentRunner", "PromptRenderer", "SqlEntityReader", "completion_cost"]

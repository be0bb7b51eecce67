"""Application services: evaluator, dedup gate, budget and tool gateways, PM Copilot helpers."""

from agentflow.application.services.budget_gateway import BudgetGateway
from agentflow.application.services.condition_evaluator import ConditionEvaluator
from agentflow.application.services.deduplication_gate import DeduplicationGate
from agentflow.application.services.suggestion_schema_validator import SuggestionSchemaValidator
from agentflow.application.services.tool_gateway import ToolGateway
from agentflow.application.services.tool_registry import CATEGORY_PERMISSIONS, ToolRegistry
from agentflow.application.services.work_order_context import WorkOrderContextBuilder

__all__ = [
    "BudgetGateway",
    "ConditionEvaluator",
    "DeduplicationGate",
    "SuggestionSchemaValidator",
    "ToolGateway",
    "ToolRegistry",
    "WorkOrderContextBuilder",
    "CATEGORY_PERMISSIONS",
]

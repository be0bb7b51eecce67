"""Trigger matching, dispatch and chain-job processing."""

from agentflow.application.use_cases.triggers.dispatch_pipeline import DispatchPipeline
from agentflow.application.use_cases.triggers.process_chain_trigger import ChainTriggerProcessor
from agentflow.application.use_cases.triggers.status_change_handler import StatusChangeHandler
from agentflow.application.use_cases.triggers.trigger_matcher import TriggerMatcher

__all__ = [
    "ChainTriggerProcessor",
    "DispatchPipeline",
    "StatusChangeHandler",
    "TriggerMatcher",
]

"""agentflow: agent trigger dispatch and resumable PM Copilot workflows."""

__version__ = "1.0.0"

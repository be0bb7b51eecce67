"""ASGI middleware."""

from agentflow.middleware.correlation_id import CorrelationIDMiddleware

__all__ = ["CorrelationIDMiddleware"]

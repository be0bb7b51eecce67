"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags.
"""

from fastapi import APIRouter

from agentflow.api.v1.endpoints import (
    health,
    inbox,
    internal,
    pm_copilot,
    status_changes,
    work_orders,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(work_orders.router, prefix="/work-orders", tags=["work-orders"])
api_router.include_router(pm_copilot.router, prefix="/pm-copilot", tags=["pm-copilot"])
api_router.include_router(
    status_changes.router, prefix="/status-changes", tags=["status-changes"]
)
api_router.include_router(inbox.router, prefix="/inbox", tags=["inbox"])
api_router.include_router(internal.router, prefix="/internal", tags=["internal"])

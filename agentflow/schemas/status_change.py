"""Status change notification schemas."""

from pydantic import BaseModel, Field

from agentflow.shared.enums import EntityType


class StatusChangeRequest(BaseModel):
    """A committed status transition reported by the owning CRUD service."""

    entity_type: EntityType
    entity_id: str = Field(..., min_length=1, max_length=64)
    from_status: str | None = Field(default=None, max_length=64)
    to_status: str | None = Field(default=None, max_length=64)


class DispatchResponse(BaseModel):
    """Trigger ids per dispatch outcome."""

    success: bool = True
    dispatched: list[str]
    suppressed: list[str]
    failed: list[str]

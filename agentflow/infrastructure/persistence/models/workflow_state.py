"""AgentWorkflowState ORM model: persisted checkpoint of a workflow run."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agentflow.infrastructure.persistence.database import Base
from agentflow.infrastructure.persistence.models.mixins import TeamScopedModel, values_check
from agentflow.shared.enums import WorkflowStatus


class AgentWorkflowState(TeamScopedModel, Base):
    """Table: agent_workflow_state. paused_at is set exactly when status is paused."""

    __tablename__ = "agent_workflow_state"

    ai_agent_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("ai_agent.id", ondelete="SET NULL"), nullable=True, index=True
    )
    agent_trigger_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("agent_trigger.id", ondelete="SET NULL"), nullable=True, index=True
    )
    workflow_class: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=WorkflowStatus.RUNNING.value, index=True
    )
    current_node: Mapped[str] = mapped_column(String(100), nullable=False)
    state_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    subject_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    subject_id: Mapped[str | None] = mapped_column(String, nullable=True)
    paused_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    pause_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    resumed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approval_required: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    failed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "ix_agent_workflow_state_subject",
            "team_id",
            "workflow_class",
            "subject_type",
            "subject_id",
        ),
        values_check("status", WorkflowStatus.values(), "agent_workflow_state_status_check"),
        sa.CheckConstraint(
            "(status = 'paused') = (paused_at IS NOT NULL)",
            name="agent_workflow_state_paused_at_check",
        ),
    )

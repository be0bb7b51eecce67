"""AI agent catalogue, per-team agent configuration and the activity log."""

from datetime import date
from decimal import Decimal
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from agentflow.infrastructure.persistence.database import Base
from agentflow.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TeamScopedModel,
    TimestampMixin,
    values_check,
)
from agentflow.shared.enums import ActivityStatus

Money = Numeric(12, 4)


class AIAgent(CuidMixin, TimestampMixin, Base):
    """Global agent catalogue entry. Table: ai_agent."""

    __tablename__ = "ai_agent"

    code: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    agent_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class AgentConfiguration(TeamScopedModel, Base):
    """Budget caps, spend counters and permissions of one agent for one team."""

    __tablename__ = "agent_configuration"

    ai_agent_id: Mapped[str] = mapped_column(
        String, ForeignKey("ai_agent.id", ondelete="CASCADE"), nullable=False, index=True
    )
    enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )
    daily_budget_cap: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    monthly_budget_cap: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    daily_spend: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0"), server_default=sa.text("0")
    )
    current_month_spend: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0"), server_default=sa.text("0")
    )
    daily_spend_reset_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    monthly_spend_period: Mapped[str | None] = mapped_column(String(7), nullable=True)
    can_create_work_orders: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    can_modify_tasks: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    can_access_client_data: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    can_send_emails: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    can_modify_deliverables: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    can_access_financial_data: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    can_modify_playbooks: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    tool_permissions: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    auto_approval_threshold: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (
        UniqueConstraint("team_id", "ai_agent_id", name="uq_agent_configuration_team_agent"),
        sa.CheckConstraint(
            "auto_approval_threshold IS NULL OR "
            "(auto_approval_threshold >= 0 AND auto_approval_threshold <= 1)",
            name="agent_configuration_threshold_check",
        ),
    )


class AgentActivityLog(TeamScopedModel, Base):
    """One row per tool call made through the gateway. Table: agent_activity_log."""

    __tablename__ = "agent_activity_log"

    agent_configuration_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("agent_configuration.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tool_name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    cost: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0"), server_default=sa.text("0")
    )
    duration_ms: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    input_summary: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    workflow_state_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("agent_workflow_state.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        Index("ix_agent_activity_log_team_created", "team_id", "created_at"),
        values_check("status", ActivityStatus.values(), "agent_activity_log_status_check"),
    )

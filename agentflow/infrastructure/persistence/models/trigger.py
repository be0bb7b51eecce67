"""AgentChain, AgentTrigger and AgentChainExecution ORM models."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agentflow.infrastructure.persistence.database import Base
from agentflow.infrastructure.persistence.models.mixins import TeamScopedModel, values_check
from agentflow.shared.enums import ChainExecutionStatus, EntityType


class AgentChain(TeamScopedModel, Base):
    """Target workflow of one or more triggers. Table: agent_chain."""

    __tablename__ = "agent_chain"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    workflow_key: Mapped[str] = mapped_column(String(100), nullable=False)
    ai_agent_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("ai_agent.id", ondelete="SET NULL"), nullable=True, index=True
    )
    enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )


class AgentTrigger(TeamScopedModel, Base):
    """Status-transition rule that starts a chain. Table: agent_trigger."""

    __tablename__ = "agent_trigger"

    agent_chain_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("agent_chain.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    status_from: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status_to: Mapped[str | None] = mapped_column(String(64), nullable=True)
    trigger_conditions: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )
    last_triggered_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    chain: Mapped[AgentChain | None] = relationship(lazy="joined")

    __table_args__ = (
        Index("ix_agent_trigger_team_entity_enabled", "team_id", "entity_type", "enabled"),
        values_check("entity_type", EntityType.values(), "agent_trigger_entity_type_check"),
    )


class AgentChainExecution(TeamScopedModel, Base):
    """One trigger firing handed to its chain. Table: agent_chain_execution."""

    __tablename__ = "agent_chain_execution"

    agent_trigger_id: Mapped[str] = mapped_column(
        String, ForeignKey("agent_trigger.id", ondelete="CASCADE"), nullable=False, index=True
    )
    agent_chain_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("agent_chain.id", ondelete="SET NULL"), nullable=True, index=True
    )
    agent_workflow_state_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("agent_workflow_state.id", ondelete="SET NULL"), nullable=True
    )
    execution_status: Mapped[str] = mapped_column(String(16), nullable=False)
    workflow_key: Mapped[str | None] = mapped_column(String(100), nullable=True)
    triggerable_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    triggerable_id: Mapped[str | None] = mapped_column(String, nullable=True)
    attempt: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default=sa.text("1")
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        values_check(
            "execution_status",
            ChainExecutionStatus.values(),
            "agent_chain_execution_status_check",
        ),
    )

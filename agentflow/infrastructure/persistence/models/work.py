"""Work records the PM Copilot reads and creates: WorkOrder, Deliverable, Task, Playbook."""

from datetime import datetime
from decimal import Decimal
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agentflow.infrastructure.persistence.database import Base
from agentflow.infrastructure.persistence.models.mixins import TeamScopedModel, values_check
from agentflow.shared.enums import DeliverableStatus, PMCopilotMode, TaskStatus


class WorkOrder(TeamScopedModel, Base):
    """Table: work_order."""

    __tablename__ = "work_order"

    project_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="draft")
    budget_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    estimated_hours: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    actual_hours: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    acceptance_criteria: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    tags: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    pm_copilot_mode: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=PMCopilotMode.FULL.value,
        server_default=PMCopilotMode.FULL.value,
    )

    __table_args__ = (
        values_check("pm_copilot_mode", PMCopilotMode.values(), "work_order_pm_copilot_mode_check"),
    )


class Deliverable(TeamScopedModel, Base):
    """Table: deliverable."""

    __tablename__ = "deliverable"

    work_order_id: Mapped[str] = mapped_column(
        String, ForeignKey("work_order.id", ondelete="CASCADE"), nullable=False, index=True
    )
    project_id: Mapped[str | None] = mapped_column(String, nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    deliverable_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=DeliverableStatus.DRAFT.value
    )
    acceptance_criteria: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    budget_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    tags: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        values_check("status", DeliverableStatus.values(), "deliverable_status_check"),
    )


class Task(TeamScopedModel, Base):
    """Table: task."""

    __tablename__ = "task"

    work_order_id: Mapped[str] = mapped_column(
        String, ForeignKey("work_order.id", ondelete="CASCADE"), nullable=False
    )
    deliverable_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("deliverable.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=TaskStatus.TODO.value)
    estimated_hours: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    position_in_work_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    checklist_items: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    tags: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    budget_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    is_blocked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa.text("false")
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_task_work_order_position", "work_order_id", "position_in_work_order"),
        values_check("status", TaskStatus.values(), "task_status_check"),
    )


class Playbook(TeamScopedModel, Base):
    """Reusable delivery template used as planning context. Table: playbook."""

    __tablename__ = "playbook"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    playbook_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    content: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    tags: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)

"""InboxItem ORM model: human-action records created by agents."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agentflow.infrastructure.persistence.database import Base
from agentflow.infrastructure.persistence.models.mixins import TeamScopedModel, values_check
from agentflow.shared.enums import AIConfidence, InboxItemType, Urgency


class InboxItem(TeamScopedModel, Base):
    """Table: inbox_item. approvable_type/approvable_id point at the workflow state."""

    __tablename__ = "inbox_item"

    item_type: Mapped[str] = mapped_column(String(32), nullable=False)
    source_type: Mapped[str] = mapped_column(String(32), nullable=False)
    source_id: Mapped[str | None] = mapped_column(String, nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content_preview: Mapped[str | None] = mapped_column(Text, nullable=True)
    urgency: Mapped[str | None] = mapped_column(String(16), nullable=True)
    ai_confidence: Mapped[str | None] = mapped_column(String(16), nullable=True)
    approvable_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    approvable_id: Mapped[str | None] = mapped_column(String, nullable=True)
    related_work_order_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String, nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_by: Mapped[str | None] = mapped_column(String, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_inbox_item_approvable", "approvable_type", "approvable_id"),
        values_check("item_type", InboxItemType.values(), "inbox_item_type_check"),
        values_check("urgency", Urgency.values(), "inbox_item_urgency_check"),
        values_check("ai_confidence", AIConfidence.values(), "inbox_item_ai_confidence_check"),
    )

"""InboxItem repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.application.dtos.work import InboxItemResult
from agentflow.infrastructure.persistence.models.inbox import InboxItem
from agentflow.infrastructure.persistence.repositories.base import BaseRepository
from agentflow.shared.utils.datetime import ensure_utc


def _inbox_result(row: InboxItem) -> InboxItemResult:
    return InboxItemResult(
        id=row.id,
        team_id=row.team_id,
        item_type=row.item_type,
        title=row.title,
        approvable_type=row.approvable_type,
        approvable_id=row.approvable_id,
        content_preview=row.content_preview,
        urgency=row.urgency,
        ai_confidence=row.ai_confidence,
        related_work_order_id=row.related_work_order_id,
        approved_at=ensure_utc(row.approved_at),
        rejected_at=ensure_utc(row.rejected_at),
    )


class InboxRepository(BaseRepository[InboxItem]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, InboxItem)

    async def create(
        self,
        team_id: str,
        *,
        item_type: str,
        source_type: str,
        title: str,
        approvable_type: str,
        approvable_id: str,
        content_preview: str | None = None,
        urgency: str | None = None,
        ai_confidence: str | None = None,
        related_work_order_id: str | None = None,
        source_id: str | None = None,
    ) -> InboxItemResult:
        row = await self.add(
            InboxItem(
                team_id=team_id,
                item_type=item_type,
                source_type=source_type,
                source_id=source_id,
                title=title[:500],
                content_preview=content_preview,
                urgency=urgency,
                ai_confidence=ai_confidence,
                approvable_type=approvable_type,
                approvable_id=approvable_id,
                related_work_order_id=related_work_order_id,
            )
        )
        return _inbox_result(row)

    async def get_by_id(self, item_id: str, team_id: str) -> InboxItemResult | None:
        row = await self.get_model(item_id, team_id)
        return _inbox_result(row) if row else None

    async def mark_approved(self, item_id: str, user_id: str | None, now: datetime) -> None:
        await self.db.execute(
            update(InboxItem)
            .where(InboxItem.id == item_id)
            .values(approved_at=now, approved_by=user_id)
            .execution_options(synchronize_session=False)
        )

    async def mark_rejected(
        self, item_id: str, user_id: str | None, reason: str | None, now: datetime
    ) -> None:
        await self.db.execute(
            update(InboxItem)
            .where(InboxItem.id == item_id)
            .values(rejected_at=now, rejected_by=user_id, rejection_reason=reason)
            .execution_options(synchronize_session=False)
        )

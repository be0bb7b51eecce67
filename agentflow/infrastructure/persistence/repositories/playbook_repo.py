"""Playbook repository (planning context for the PM Copilot)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agentflow.application.dtos.work import tag_names
from agentflow.infrastructure.persistence.models.work import Playbook
from agentflow.infrastructure.persistence.repositories.base import BaseRepository

# Playbooks scanned per team before tag filtering.
_SCAN_LIMIT = 200


def _playbook_context(row: Playbook) -> dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "description": row.description,
        "type": row.playbook_type,
        "content": row.content,
        "tags": tag_names(row.tags or []),
    }


class PlaybookRepository(BaseRepository[Playbook]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Playbook)

    async def list_relevant(
        self, team_id: str, tags: list[str], limit: int = 5
    ) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(Playbook)
            .where(Playbook.team_id == team_id)
            .order_by(Playbook.created_at.desc(), Playbook.id.asc())
            .limit(_SCAN_LIMIT)
        )
        playbooks = [_playbook_context(row) for row in result.scalars().all()]
        if tags:
            wanted = set(tags)
            playbooks = [p for p in playbooks if wanted.intersection(p["tags"])]
        return playbooks[:limit]

"""
Note management. Authorization happens before these calls, against the
note's plan.
"""

import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, QuotaExceededError
from app.models.base import utcnow
from app.models.note import Note, NoteType
from app.settings import settings

logger = logging.getLogger(__name__)


class NoteService:
    """Note operations bound to one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_by_plan(self, plan_id: int, note_type: NoteType | None = None) -> list[Note]:
        """List all notes for a plan, optionally filtered by type."""
        query = select(Note).where(Note.plan_id == plan_id)
        if note_type:
            query = query.where(Note.type == NoteType(note_type).value)

        result = await self.db.execute(query.order_by(Note.created_at.desc(), Note.id.desc()))
        return list(result.scalars().all())

    async def get(self, note_id: int) -> Note | None:
        return await self.db.scalar(select(Note).where(Note.id == note_id))

    async def count_by_plan(self, plan_id: int) -> int:
        """Count notes in a plan (for quota enforcement)."""
        count = await self.db.scalar(
            select(func.count()).select_from(Note).where(Note.plan_id == plan_id)
        )
        return count or 0

    async def create(self, plan_id: int, note_type: NoteType, content: dict[str, Any], user_id: int) -> Note:
        count = await self.count_by_plan(plan_id)
        quota = settings.plan_note_quota
        if count >= quota:
            raise QuotaExceededError("notes", quota, count)

        note = Note(
            plan_id=plan_id,
            user_id=user_id,
            type=NoteType(note_type).value,
            content=content,
        )
        self.db.add(note)
        await self.db.commit()

        logger.info("User %s created %s note %s in plan %s", user_id, note.type, note.id, plan_id)
        return note

    async def update(self, note_id: int, content: dict[str, Any]) -> Note:
        """Shallow-merge `content` into the note's existing content."""
        note = await self.get(note_id)
        if note is None:
            raise NotFoundError("Note")

        # Reassign so the JSON column is flagged dirty
        note.content = {**(note.content or {}), **content}
        note.updated_at = utcnow()
        await self.db.commit()
        return note

    async def delete(self, note_id: int) -> bool:
        result = await self.db.execute(delete(Note).where(Note.id == note_id))
        await self.db.commit()
        return result.rowcount > 0

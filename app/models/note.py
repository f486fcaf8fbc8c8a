"""
Note model.

A note belongs to exactly one plan and has no permissions of its own:
access to a note is always decided against its plan.
"""

from enum import Enum
from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base
from app.models.base import TimestampMixin


class NoteType(str, Enum):
    TEXT = "text"
    TODO = "todo"
    CALENDAR = "calendar"
    LOCATION = "location"


class Note(Base, TimestampMixin):
    """A note in a plan. Content is an opaque JSON object."""

    __tablename__ = "notes"
    __table_args__ = (
        Index("ix_notes_plan_id", "plan_id"),
        Index("ix_notes_user_id", "user_id"),
        Index("ix_notes_type", "type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("plans.id", ondelete="CASCADE"), nullable=False)

    # Author
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    type: Mapped[NoteType] = mapped_column(String(20), nullable=False)
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Relationships
    plan = relationship("Plan", back_populates="notes")
    author = relationship("User")

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, type={self.type}, plan_id={self.plan_id})>"

"""
Plan model - a shared collection of notes.
"""

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base
from app.models.base import TimestampMixin


class Plan(Base, TimestampMixin):
    """A plan owned by its creator and shared with members.

    The creator (owner_id) is the permanent owner; ownership is never
    transferred. Deleting the plan cascades to its members, pending
    invitations and notes at the database level.
    """

    __tablename__ = "plans"
    __table_args__ = (
        Index("ix_plans_owner_id", "owner_id"),
        Index("ix_plans_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    owner = relationship("User", back_populates="owned_plans")
    members = relationship("PlanMember", back_populates="plan", lazy="raise", passive_deletes=True)
    pending_invitations = relationship(
        "PendingInvitation", back_populates="plan", lazy="raise", passive_deletes=True
    )
    notes = relationship("Note", back_populates="plan", lazy="raise", passive_deletes=True)

    def is_owner(self, user_id: int) -> bool:
        return self.owner_id == user_id

    def __repr__(self) -> str:
        return f"<Plan id={self.id} owner={self.owner_id}>"

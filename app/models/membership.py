"""
Plan membership model and the plan role ordering.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base
from app.models.base import TimestampMixin


class PlanRole(str, Enum):
    """Role of a user on a plan.

    Roles form a total order, owner > editor > viewer. Every authorization
    check compares ranks through this enum so the ordering lives in one place.
    """

    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"

    @property
    def rank(self) -> int:
        return _ROLE_RANKS[self]

    def at_least(self, other: "PlanRole") -> bool:
        """True when this role grants everything `other` grants."""
        return self.rank >= PlanRole(other).rank

    @property
    def is_invitable(self) -> bool:
        return self in INVITABLE_ROLES


_ROLE_RANKS: dict[PlanRole, int] = {
    PlanRole.OWNER: 3,
    PlanRole.EDITOR: 2,
    PlanRole.VIEWER: 1,
}

# Owner is never assignable through an invite or a role change
INVITABLE_ROLES = frozenset({PlanRole.EDITOR, PlanRole.VIEWER})

# Forbidden messages when a caller ranks below the required role
ROLE_ERROR_MESSAGES: dict[PlanRole, str] = {
    PlanRole.OWNER: "Only the plan owner can perform this action",
    PlanRole.EDITOR: "Viewers cannot perform this action",
    PlanRole.VIEWER: "You need at least viewer access to this plan",
}


class PlanMember(Base, TimestampMixin):
    """Confirmed membership of a user in a plan."""

    __tablename__ = "plan_members"
    __table_args__ = (
        UniqueConstraint("plan_id", "user_id", name="uq_plan_member_plan_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("plans.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role: Mapped[PlanRole] = mapped_column(String(20), default=PlanRole.VIEWER, nullable=False)

    # Relationships
    plan = relationship("Plan", back_populates="members")
    user = relationship("User", back_populates="plan_memberships")

    @property
    def joined_at(self) -> datetime:
        return self.created_at

    @property
    def is_owner(self) -> bool:
        return PlanRole(self.role) == PlanRole.OWNER

    def __repr__(self) -> str:
        return f"<PlanMember user={self.user_id} plan={self.plan_id} role={self.role}>"

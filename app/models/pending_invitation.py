"""
Pending invitation model for emails that have no account yet.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base
from app.models.base import utcnow
from app.models.membership import PlanRole


class PendingInvitation(Base):
    """Invitation to a plan for an email address awaiting signup.

    Rows are removed by cancellation or converted into a PlanMember when a
    user registers with the invited email. There is no expiry.
    """

    __tablename__ = "pending_invitations"
    __table_args__ = (
        UniqueConstraint("plan_id", "email", name="uq_pending_invitation_plan_email"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("plans.id", ondelete="CASCADE"), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Role to assign when accepted (editor or viewer)
    role: Mapped[PlanRole] = mapped_column(String(20), nullable=False)

    invited_by_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    plan = relationship("Plan", back_populates="pending_invitations")
    invited_by = relationship("User", foreign_keys=[invited_by_id])

    @classmethod
    def create(
        cls,
        plan_id: int,
        email: str,
        role: PlanRole,
        invited_by_id: int,
    ) -> "PendingInvitation":
        """Create a new pending invitation."""
        return cls(
            plan_id=plan_id,
            email=email.lower().strip(),
            role=PlanRole(role).value,
            invited_by_id=invited_by_id,
        )

    def __repr__(self) -> str:
        return f"<PendingInvitation {self.email} -> plan={self.plan_id} role={self.role}>"

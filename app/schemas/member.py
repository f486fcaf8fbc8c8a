"""Member and invitation schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from app.models.membership import PlanRole

# Owner is not assignable: requests carrying it fail validation at the boundary
InviteRole = Literal["editor", "viewer"]


class InviteMemberRequest(BaseModel):
    """Schema for inviting a user to a plan by email."""

    email: EmailStr
    role: InviteRole

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class UpdateMemberRoleRequest(BaseModel):
    """Schema for changing a member's role."""

    role: InviteRole


class MemberRead(BaseModel):
    """A confirmed member joined with the user's identity fields."""

    user_id: int
    email: str
    name: str | None
    role: PlanRole
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PendingInvitationRead(BaseModel):
    email: str
    role: PlanRole
    invited_at: datetime


class MembersWithInvitations(BaseModel):
    members: list[MemberRead]
    pending_invitations: list[PendingInvitationRead]


class PendingInviteStatus(BaseModel):
    """Summary returned when the invited email has no account yet."""

    status: Literal["pending"] = "pending"
    email: str
    role: PlanRole
    message: str = "Invitation will be activated when user signs up"


class InviteResult(BaseModel):
    """Outcome of an invite: a new member, or a pending invitation."""

    type: Literal["member", "pending"]
    member: MemberRead | None = None
    pending: PendingInviteStatus | None = None

"""Pydantic schemas for request/response validation."""

from app.schemas.auth import LoginRequest, RegisterRequest, SessionResponse, UserRead
from app.schemas.member import (
    InviteMemberRequest,
    InviteResult,
    MemberRead,
    MembersWithInvitations,
    PendingInvitationRead,
    PendingInviteStatus,
    UpdateMemberRoleRequest,
)
from app.schemas.note import NoteCreate, NoteList, NoteRead, NoteUpdate
from app.schemas.plan import (
    Pagination,
    PlanCreate,
    PlanDetails,
    PlanList,
    PlanMemberRead,
    PlanRead,
    PlanUpdate,
)

__all__ = [
    "InviteMemberRequest",
    "InviteResult",
    "LoginRequest",
    "MemberRead",
    "MembersWithInvitations",
    "NoteCreate",
    "NoteList",
    "NoteRead",
    "NoteUpdate",
    "Pagination",
    "PendingInvitationRead",
    "PendingInviteStatus",
    "PlanCreate",
    "PlanDetails",
    "PlanList",
    "PlanMemberRead",
    "PlanRead",
    "PlanUpdate",
    "RegisterRequest",
    "SessionResponse",
    "UpdateMemberRoleRequest",
    "UserRead",
]

# Models package
from app.db import Base
from app.models.user import User
from app.models.plan import Plan
from app.models.membership import PlanMember, PlanRole, INVITABLE_ROLES, ROLE_ERROR_MESSAGES
from app.models.pending_invitation import PendingInvitation
from app.models.note import Note, NoteType

__all__ = [
    "Base",
    "User",
    "Plan",
    "PlanMember",
    "PlanRole",
    "INVITABLE_ROLES",
    "ROLE_ERROR_MESSAGES",
    "PendingInvitation",
    "Note",
    "NoteType",
]

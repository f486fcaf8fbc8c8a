"""
Access gate for plan- and note-scoped operations.

Two stages run in front of every guarded operation:

1. `authorize_plan` resolves the caller's role and rejects missing plans
   (NotFound) and callers without access (Forbidden), producing a
   PlanContext.
2. `require_role` compares the context's role against a minimum role.

The context is an explicit value handed from stage 1 to stage 2 and on to
the operation; nothing is kept in ambient request state.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConfigurationError, ForbiddenError, NotFoundError
from app.models.membership import ROLE_ERROR_MESSAGES, PlanRole
from app.models.note import Note
from app.services.roles import resolve_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanContext:
    """Authorization context for one request against one plan."""

    plan_id: int
    user_id: int
    role: PlanRole

    @property
    def is_owner(self) -> bool:
        return self.role == PlanRole.OWNER


@dataclass(frozen=True)
class NoteContext:
    """Authorization context for a note; permissions come from its plan."""

    note_id: int
    plan: PlanContext


async def authorize_plan(
    db: AsyncSession,
    plan_id: int,
    user_id: int,
    denied_message: str = "You don't have access to this plan",
) -> PlanContext:
    """Resolve the caller's role on a plan or reject the request."""
    resolution = await resolve_role(db, plan_id, user_id)

    if not resolution.plan_exists:
        raise NotFoundError("Plan")

    if not resolution.has_access:
        logger.info("Denied user %s access to plan %s", user_id, plan_id)
        raise ForbiddenError(denied_message)

    return PlanContext(plan_id=plan_id, user_id=user_id, role=resolution.role)


def require_role(context: PlanContext | None, min_role: PlanRole) -> PlanContext:
    """Check a resolved context ranks at least `min_role`.

    A missing context means the plan access stage was never wired in front
    of this check, which is a server bug rather than a caller error.
    """
    if context is None:
        raise ConfigurationError("require_role must run after plan access has been resolved")

    if not context.role.at_least(min_role):
        logger.info(
            "User %s with role %s lacks %s on plan %s",
            context.user_id, context.role.value, PlanRole(min_role).value, context.plan_id,
        )
        raise ForbiddenError(ROLE_ERROR_MESSAGES[PlanRole(min_role)])

    return context


async def authorize_note(db: AsyncSession, note_id: int, user_id: int) -> NoteContext:
    """Resolve a note to its plan, then run the plan access check on it."""
    plan_id = await db.scalar(select(Note.plan_id).where(Note.id == note_id))
    if plan_id is None:
        raise NotFoundError("Note")

    plan = await authorize_plan(
        db, plan_id, user_id, denied_message="You don't have access to this note"
    )
    return NoteContext(note_id=note_id, plan=plan)

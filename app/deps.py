"""
FastAPI dependencies for authentication, database, and plan access.
"""

from typing import Annotated

from fastapi import Cookie, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.errors import ConfigurationError, UnauthorizedError, ValidationError
from app.models.membership import PlanRole
from app.models.user import User
from app.services.access import NoteContext, PlanContext, authorize_note, authorize_plan, require_role

# Type alias for database dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


def _bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return None


async def get_current_user_optional(
    request: Request,
    db: DBSession,
    session_token: str | None = Cookie(default=None),
) -> User | None:
    """Get current user from the session cookie or a Bearer token.

    Returns None when no token is presented or the session has expired.
    """
    token = session_token or _bearer_token(request)
    if not token:
        return None

    user = await db.scalar(select(User).where(User.session_token == token))
    if not user or not user.is_active or not user.is_session_valid():
        return None

    return user


async def get_current_user(
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    """Get current user (raises 401 if not authenticated)."""
    if not user:
        raise UnauthorizedError()
    return user


# Type alias for authenticated user dependency
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentUserOptional = Annotated[User | None, Depends(get_current_user_optional)]


def _path_id(request: Request, name: str) -> int:
    raw = request.path_params.get(name)
    if raw is None:
        raise ConfigurationError(f"Route has no '{name}' path parameter to authorize against")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError([{
            "field": name,
            "message": f"{name} must be an integer",
            "constraint": "type",
        }]) from None


async def get_plan_context(request: Request, user: CurrentUser, db: DBSession) -> PlanContext:
    """Resolve the caller's role on the plan named by the `plan_id` path parameter."""
    plan_id = _path_id(request, "plan_id")
    return await authorize_plan(db, plan_id, user.id)


PlanAccess = Annotated[PlanContext, Depends(get_plan_context)]


def require_plan_role(min_role: PlanRole):
    """Dependency factory: plan access followed by a minimum role check."""

    async def dependency(context: PlanAccess) -> PlanContext:
        return require_role(context, min_role)

    return dependency


PlanViewer = Annotated[PlanContext, Depends(require_plan_role(PlanRole.VIEWER))]
PlanEditor = Annotated[PlanContext, Depends(require_plan_role(PlanRole.EDITOR))]
PlanOwner = Annotated[PlanContext, Depends(require_plan_role(PlanRole.OWNER))]


async def get_note_context(request: Request, user: CurrentUser, db: DBSession) -> NoteContext:
    """Resolve the note named by the `note_id` path parameter to its plan context."""
    note_id = _path_id(request, "note_id")
    return await authorize_note(db, note_id, user.id)


NoteAccess = Annotated[NoteContext, Depends(get_note_context)]


def require_note_role(min_role: PlanRole):
    async def dependency(context: NoteAccess) -> NoteContext:
        require_role(context.plan, min_role)
        return context

    return dependency


NoteViewer = Annotated[NoteContext, Depends(require_note_role(PlanRole.VIEWER))]
NoteEditor = Annotated[NoteContext, Depends(require_note_role(PlanRole.EDITOR))]

"""
Authentication router for local email/password accounts.
"""

import logging

from fastapi import APIRouter, Request, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.deps import CurrentUser, CurrentUserOptional, DBSession
from app.errors import ConflictError, ForbiddenError, RateLimitedError, UnauthorizedError
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest, SessionResponse, UserRead
from app.services.members import MemberService
from app.services.password import hash_password, validate_password, verify_password
from app.services.rate_limiter import auth_rate_limiter
from app.services.signup import run_signup_hooks
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_client_ip(request: Request) -> str:
    """Get client IP for rate limiting."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _set_session_cookie(response: Response, session_token: str) -> None:
    response.set_cookie(
        key="session_token",
        value=session_token,
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
        max_age=settings.session_expire_hours * 3600,
        path="/",
    )


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    response: Response,
    db: DBSession,
    body: RegisterRequest,
):
    """Create an account, start a session and run the signup hooks."""
    if not auth_rate_limiter.is_allowed(f"register:{get_client_ip(request)}"):
        raise RateLimitedError("Too many registration attempts")

    validate_password(body.password, settings.password_min_length)

    existing = await db.scalar(select(User.id).where(User.email == body.email))
    if existing:
        raise ConflictError("Email already registered")

    user = User(
        email=body.email,
        display_name=body.display_name,
        hashed_password=hash_password(body.password),
    )
    session_token = user.generate_session_token()
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("Email already registered") from exc

    logger.info("Registered user %s", user.id)

    # Invitations sent before the account existed become memberships here
    await run_signup_hooks(db, user.id, user.email)

    _set_session_cookie(response, session_token)
    return SessionResponse(user=UserRead.model_validate(user), session_token=session_token)


@router.post("/login", response_model=SessionResponse)
async def login(
    request: Request,
    response: Response,
    db: DBSession,
    body: LoginRequest,
):
    """Handle local login."""
    if not auth_rate_limiter.is_allowed(f"login:{get_client_ip(request)}"):
        raise RateLimitedError("Too many login attempts")

    user = await db.scalar(select(User).where(User.email == body.email))

    if not user or not user.hashed_password or not verify_password(body.password, user.hashed_password):
        raise UnauthorizedError("Invalid email or password")

    if not user.is_active:
        raise ForbiddenError("Account is disabled")

    session_token = user.generate_session_token()
    user.update_last_seen()
    await db.commit()

    # Picks up invitations a failed or raced signup reconciliation left pending
    accepted = await MemberService(db).accept_pending_invitations(user.id, user.email)
    if accepted:
        logger.info("Accepted %d leftover invitation(s) at login for user %s", accepted, user.id)

    _set_session_cookie(response, session_token)
    return SessionResponse(user=UserRead.model_validate(user), session_token=session_token)


@router.post("/logout")
async def logout(
    response: Response,
    db: DBSession,
    user: CurrentUserOptional,
):
    """Handle logout."""
    if user:
        user.clear_session()
        await db.commit()

    response.delete_cookie("session_token", path="/")
    return {"success": True}


@router.get("/me", response_model=UserRead)
async def me(user: CurrentUser):
    return user

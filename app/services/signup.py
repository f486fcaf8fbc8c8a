"""
Post-signup hooks.

The auth layer calls `run_signup_hooks` once a new account has been
committed. Hooks run in registration order with the same session and any
failure propagates to the caller.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.services.members import MemberService

logger = logging.getLogger(__name__)

SignupHook = Callable[[AsyncSession, int, str], Awaitable[Any]]

_signup_hooks: list[SignupHook] = []


def register_signup_hook(hook: SignupHook) -> SignupHook:
    """Register a coroutine called as hook(db, user_id, email) after signup."""
    if hook not in _signup_hooks:
        _signup_hooks.append(hook)
    return hook


async def run_signup_hooks(db: AsyncSession, user_id: int, email: str) -> None:
    for hook in _signup_hooks:
        logger.debug("Running signup hook %s for user %s", hook.__name__, user_id)
        await hook(db, user_id, email)


@register_signup_hook
async def accept_invitations_on_signup(db: AsyncSession, user_id: int, email: str) -> int:
    """Convert invitations sent to this email before the account existed."""
    return await MemberService(db).accept_pending_invitations(user_id, email)

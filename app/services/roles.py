"""
Effective role resolution for plans.

The effective role is derived, never stored: the plan's creator is always
the owner, anyone else gets the role of their membership row, and everyone
else has no access. It is recomputed on every authorization check.
"""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.membership import PlanMember, PlanRole
from app.models.plan import Plan


@dataclass(frozen=True)
class RoleResolution:
    """Outcome of a role lookup.

    `plan_exists=False` means the plan is missing (404); `role=None` with an
    existing plan means the caller has no access (403).
    """

    plan_exists: bool
    role: PlanRole | None = None

    @property
    def has_access(self) -> bool:
        return self.plan_exists and self.role is not None


async def resolve_role(db: AsyncSession, plan_id: int, user_id: int) -> RoleResolution:
    """Compute a user's effective role on a plan. Never raises for "no access"."""
    owner_id = await db.scalar(select(Plan.owner_id).where(Plan.id == plan_id))
    if owner_id is None:
        return RoleResolution(plan_exists=False)

    # Ownership comes from the plan itself, not from the owner's member row
    if owner_id == user_id:
        return RoleResolution(plan_exists=True, role=PlanRole.OWNER)

    role = await db.scalar(
        select(PlanMember.role).where(
            PlanMember.plan_id == plan_id,
            PlanMember.user_id == user_id,
        )
    )
    if role is None:
        return RoleResolution(plan_exists=True)

    return RoleResolution(plan_exists=True, role=PlanRole(role))

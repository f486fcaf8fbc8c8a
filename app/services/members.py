"""
Plan membership lifecycle: invitations, acceptance at signup, role changes
and removals.

Every mutating method runs as one transaction and commits before returning.
Uniqueness of (plan, user) memberships and (plan, email) invitations is
enforced by database constraints; a lost race surfaces as ConflictError,
never as a second row.
"""

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, ForbiddenError, NotFoundError, QuotaExceededError
from app.models.base import utcnow
from app.models.membership import PlanMember, PlanRole
from app.models.pending_invitation import PendingInvitation
from app.models.plan import Plan
from app.models.user import User
from app.schemas.member import (
    InviteResult,
    MemberRead,
    MembersWithInvitations,
    PendingInvitationRead,
    PendingInviteStatus,
)
from app.settings import settings

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class MemberService:
    """Membership operations for plans, bound to one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_by_plan(self, plan_id: int) -> MembersWithInvitations:
        """List confirmed members (owner included) and pending invitations."""
        result = await self.db.execute(
            self._member_query().where(PlanMember.plan_id == plan_id).order_by(PlanMember.created_at, PlanMember.id)
        )
        members = [self._to_member(row) for row in result.all()]

        result = await self.db.execute(
            select(PendingInvitation)
            .where(PendingInvitation.plan_id == plan_id)
            .order_by(PendingInvitation.created_at, PendingInvitation.id)
        )
        pending = [
            PendingInvitationRead(email=inv.email, role=inv.role, invited_at=inv.created_at)
            for inv in result.scalars().all()
        ]

        return MembersWithInvitations(members=members, pending_invitations=pending)

    async def count_members(self, plan_id: int) -> int:
        """Count confirmed members of a plan (for the seat quota)."""
        count = await self.db.scalar(
            select(func.count()).select_from(PlanMember).where(PlanMember.plan_id == plan_id)
        )
        return count or 0

    async def get_member(self, plan_id: int, user_id: int) -> MemberRead | None:
        result = await self.db.execute(
            self._member_query().where(
                PlanMember.plan_id == plan_id,
                PlanMember.user_id == user_id,
            )
        )
        row = result.first()
        return self._to_member(row) if row else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def invite(self, plan_id: int, email: str, role: PlanRole, invited_by: int) -> InviteResult:
        """Invite an email to a plan.

        If an account exists for the email it becomes a member right away,
        otherwise a pending invitation is stored until that email signs up.
        """
        role = self._assignable(role)
        email = email.lower().strip()

        # Serialize invites per plan so two requests can't both take the last seat
        await self.db.execute(select(Plan.id).where(Plan.id == plan_id).with_for_update())

        member_count = await self.count_members(plan_id)
        quota = settings.plan_member_quota
        if member_count >= quota:
            raise QuotaExceededError("members", quota, member_count)

        user = await self.db.scalar(select(User).where(User.email == email))

        if user:
            existing = await self.db.scalar(
                select(PlanMember.id).where(
                    PlanMember.plan_id == plan_id,
                    PlanMember.user_id == user.id,
                )
            )
            if existing:
                raise ConflictError("User is already a member of this plan")

            member = PlanMember(plan_id=plan_id, user_id=user.id, role=role.value)
            self.db.add(member)
            await self._commit_or_conflict("User is already a member of this plan")

            logger.info("Added user %s to plan %s as %s", user.id, plan_id, role.value)
            return InviteResult(
                type="member",
                member=MemberRead(
                    user_id=user.id,
                    email=user.email,
                    name=user.display_name,
                    role=role,
                    joined_at=member.joined_at,
                ),
            )

        existing = await self.db.scalar(
            select(PendingInvitation.id).where(
                PendingInvitation.plan_id == plan_id,
                PendingInvitation.email == email,
            )
        )
        if existing:
            raise ConflictError("User has already been invited")

        self.db.add(PendingInvitation.create(
            plan_id=plan_id,
            email=email,
            role=role,
            invited_by_id=invited_by,
        ))
        await self._commit_or_conflict("User has already been invited")

        logger.info("Created pending invitation for %s on plan %s as %s", email, plan_id, role.value)

        # A signup may have committed and reconciled since the lookup above
        user_id = await self.db.scalar(select(User.id).where(User.email == email))
        if user_id is not None:
            await self.accept_pending_invitations(user_id, email)
            member = await self.get_member(plan_id, user_id)
            if member is not None:
                return InviteResult(type="member", member=member)

        return InviteResult(type="pending", pending=PendingInviteStatus(email=email, role=role))

    async def accept_pending_invitations(self, user_id: int, email: str) -> int:
        """Turn every pending invitation for `email` into a membership.

        Called from the signup hook. All invitations are converted in one
        transaction; an existing membership is left untouched, so running
        this again is safe. Returns the number of invitations converted.
        """
        email = email.lower().strip()

        result = await self.db.execute(
            select(PendingInvitation)
            .where(PendingInvitation.email == email)
            .with_for_update()
        )
        invitations = result.scalars().all()
        if not invitations:
            return 0

        for invitation in invitations:
            await self.db.execute(
                self._insert_member_ignoring_conflict(
                    plan_id=invitation.plan_id,
                    user_id=user_id,
                    role=PlanRole(invitation.role).value,
                )
            )
            await self.db.execute(
                delete(PendingInvitation).where(PendingInvitation.id == invitation.id)
            )

        await self.db.commit()

        logger.info("Accepted %d pending invitation(s) for user %s", len(invitations), user_id)
        return len(invitations)

    async def update_role(self, plan_id: int, target_user_id: int, new_role: PlanRole) -> MemberRead:
        """Change a member's role. The owner's role can never change."""
        new_role = self._assignable(new_role)

        member = await self._lock_member(plan_id, target_user_id)
        if member is None:
            raise NotFoundError("Member")

        if await self._is_owner(plan_id, member):
            raise ForbiddenError("Cannot change the owner's role")

        # Conditional on the row still existing and still not being the owner
        result = await self.db.execute(
            update(PlanMember)
            .where(
                PlanMember.id == member.id,
                PlanMember.role != PlanRole.OWNER.value,
            )
            .values(role=new_role.value, updated_at=utcnow())
        )
        if result.rowcount == 0:
            raise NotFoundError("Member")

        await self.db.commit()
        logger.info("Changed role of user %s on plan %s to %s", target_user_id, plan_id, new_role.value)

        updated = await self.get_member(plan_id, target_user_id)
        if updated is None:
            raise NotFoundError("Member")
        return updated

    async def remove(
        self,
        plan_id: int,
        target_user_id: int,
        requesting_user_id: int,
        requesting_user_role: PlanRole,
    ) -> bool:
        """Remove a member, or leave the plan when target and requester match.

        The owner can remove anyone but themselves; other members can only
        remove themselves. Returns whether a row was deleted.
        """
        member = await self._lock_member(plan_id, target_user_id)
        if member is None:
            raise NotFoundError("Member")

        if await self._is_owner(plan_id, member):
            raise ForbiddenError("Owner cannot leave the plan")

        is_self = target_user_id == requesting_user_id
        if not is_self and PlanRole(requesting_user_role) != PlanRole.OWNER:
            raise ForbiddenError("Only the owner can remove members")

        result = await self.db.execute(
            delete(PlanMember).where(
                PlanMember.id == member.id,
                PlanMember.role != PlanRole.OWNER.value,
            )
        )
        await self.db.commit()

        removed = result.rowcount > 0
        if removed:
            if is_self:
                logger.info("User %s left plan %s", target_user_id, plan_id)
            else:
                logger.info("User %s removed user %s from plan %s", requesting_user_id, target_user_id, plan_id)
        return removed

    async def cancel_invitation(self, plan_id: int, email: str) -> bool:
        """Delete a pending invitation. Returns whether one existed."""
        email = email.lower().strip()
        result = await self.db.execute(
            delete(PendingInvitation).where(
                PendingInvitation.plan_id == plan_id,
                PendingInvitation.email == email,
            )
        )
        await self.db.commit()

        cancelled = result.rowcount > 0
        if cancelled:
            logger.info("Cancelled invitation for %s on plan %s", email, plan_id)
        return cancelled

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _assignable(role: PlanRole) -> PlanRole:
        """Owner is held only by the plan's creator and is never granted."""
        role = PlanRole(role)
        if not role.is_invitable:
            raise ForbiddenError("The owner role cannot be assigned")
        return role

    @staticmethod
    def _member_query():
        return select(
            PlanMember.user_id,
            User.email,
            User.display_name,
            PlanMember.role,
            PlanMember.created_at,
        ).join(User, User.id == PlanMember.user_id)

    @staticmethod
    def _to_member(row) -> MemberRead:
        return MemberRead(
            user_id=row.user_id,
            email=row.email,
            name=row.display_name,
            role=row.role,
            joined_at=row.created_at,
        )

    async def _lock_member(self, plan_id: int, user_id: int) -> PlanMember | None:
        return await self.db.scalar(
            select(PlanMember)
            .where(
                PlanMember.plan_id == plan_id,
                PlanMember.user_id == user_id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    async def _is_owner(self, plan_id: int, member: PlanMember) -> bool:
        """The owner is the plan's creator; an owner-role row is protected too."""
        if member.is_owner:
            return True
        owner_id = await self.db.scalar(select(Plan.owner_id).where(Plan.id == plan_id))
        return owner_id == member.user_id

    def _insert_member_ignoring_conflict(self, **values):
        dialect = self.db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT[dialect]
        return (
            insert(PlanMember)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["plan_id", "user_id"])
        )

    async def _commit_or_conflict(self, message: str) -> None:
        """Commit; a unique constraint violation from a concurrent insert becomes a Conflict."""
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(message) from exc

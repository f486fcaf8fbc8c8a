"""
Plan management: listing, creation, update and deletion.
"""

import logging

from sqlalchemy import and_, case, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, QuotaExceededError
from app.models.base import utcnow
from app.models.membership import PlanMember, PlanRole
from app.models.note import Note
from app.models.plan import Plan
from app.models.user import User
from app.schemas.plan import PlanDetails, PlanMemberRead, PlanNoteRead, PlanRead
from app.settings import settings

logger = logging.getLogger(__name__)


class PlanService:
    """Plan operations bound to one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_by_user(self, user_id: int, page: int = 1, limit: int = 20) -> tuple[list[PlanRead], int]:
        """List plans the user owns or is a member of, newest activity first."""
        offset = (page - 1) * limit

        membership = and_(
            PlanMember.plan_id == Plan.id,
            PlanMember.user_id == user_id,
        )
        visible = or_(Plan.owner_id == user_id, PlanMember.user_id == user_id)
        role = case(
            (Plan.owner_id == user_id, PlanRole.OWNER.value),
            else_=PlanMember.role,
        ).label("role")

        result = await self.db.execute(
            select(Plan, role)
            .outerjoin(PlanMember, membership)
            .where(visible)
            .order_by(Plan.updated_at.desc(), Plan.id.desc())
            .offset(offset)
            .limit(limit)
        )
        plans = [self._to_read(plan, role) for plan, role in result.all()]

        total = await self.db.scalar(
            select(func.count(Plan.id))
            .outerjoin(PlanMember, membership)
            .where(visible)
        )
        return plans, total or 0

    async def count_by_user(self, user_id: int) -> int:
        """Count plans owned by a user (for quota enforcement)."""
        count = await self.db.scalar(
            select(func.count()).select_from(Plan).where(Plan.owner_id == user_id)
        )
        return count or 0

    async def get(self, plan_id: int) -> Plan | None:
        return await self.db.scalar(select(Plan).where(Plan.id == plan_id))

    async def get_details(self, plan_id: int, role: PlanRole) -> PlanDetails:
        """Get a plan with its notes and members, as seen with `role`."""
        plan = await self.get(plan_id)
        if plan is None:
            raise NotFoundError("Plan")

        result = await self.db.execute(
            select(Note).where(Note.plan_id == plan_id).order_by(Note.created_at.desc(), Note.id.desc())
        )
        notes = [PlanNoteRead.model_validate(note) for note in result.scalars().all()]

        result = await self.db.execute(
            select(PlanMember.user_id, User.email, User.display_name, PlanMember.role)
            .join(User, User.id == PlanMember.user_id)
            .where(PlanMember.plan_id == plan_id)
            .order_by(PlanMember.created_at, PlanMember.id)
        )
        members = [
            PlanMemberRead(user_id=row.user_id, email=row.email, name=row.display_name, role=row.role)
            for row in result.all()
        ]

        return PlanDetails(
            **self._to_read(plan, role).model_dump(),
            notes=notes,
            members=members,
        )

    async def create(self, title: str, description: str | None, user_id: int) -> PlanRead:
        """Create a plan together with the creator's owner membership row."""
        owned = await self.count_by_user(user_id)
        quota = settings.user_plan_quota
        if owned >= quota:
            raise QuotaExceededError("plans", quota, owned)

        plan = Plan(owner_id=user_id, title=title.strip(), description=description)
        self.db.add(plan)
        await self.db.flush()

        # Listed as a member; the role used for authorization still comes from owner_id
        self.db.add(PlanMember(plan_id=plan.id, user_id=user_id, role=PlanRole.OWNER.value))
        await self.db.commit()

        logger.info("User %s created plan %s", user_id, plan.id)
        return self._to_read(plan, PlanRole.OWNER)

    async def update(
        self,
        plan_id: int,
        role: PlanRole,
        title: str | None = None,
        description: str | None = None,
    ) -> PlanRead:
        plan = await self.get(plan_id)
        if plan is None:
            raise NotFoundError("Plan")

        if title is not None:
            plan.title = title.strip()
        if description is not None:
            plan.description = description
        plan.updated_at = utcnow()

        await self.db.commit()
        return self._to_read(plan, role)

    async def delete(self, plan_id: int) -> bool:
        """Delete a plan. Members, invitations and notes go with it (FK cascade)."""
        result = await self.db.execute(delete(Plan).where(Plan.id == plan_id))
        await self.db.commit()

        deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted plan %s", plan_id)
        return deleted

    @staticmethod
    def _to_read(plan: Plan, role: PlanRole | str) -> PlanRead:
        return PlanRead(
            id=plan.id,
            title=plan.title,
            description=plan.description,
            owner_id=plan.owner_id,
            role=role,
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )

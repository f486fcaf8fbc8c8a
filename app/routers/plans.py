"""
Plans router: list, create, view, update and delete plans.
"""

import math

from fastapi import APIRouter, Query, status

from app.deps import CurrentUser, DBSession, PlanEditor, PlanOwner, PlanViewer
from app.errors import NotFoundError
from app.schemas.plan import Pagination, PlanCreate, PlanDetails, PlanList, PlanRead, PlanUpdate
from app.services.plans import PlanService

router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("", response_model=PlanList)
async def list_plans(
    user: CurrentUser,
    db: DBSession,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    """List plans the current user owns or is a member of."""
    plans, total = await PlanService(db).list_by_user(user.id, page, limit)
    return PlanList(
        data=plans,
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.post("", response_model=PlanRead, status_code=status.HTTP_201_CREATED)
async def create_plan(body: PlanCreate, user: CurrentUser, db: DBSession):
    return await PlanService(db).create(body.title, body.description, user.id)


@router.get("/{plan_id}", response_model=PlanDetails)
async def get_plan(context: PlanViewer, db: DBSession):
    """Get a plan with its notes and members."""
    return await PlanService(db).get_details(context.plan_id, context.role)


@router.put("/{plan_id}", response_model=PlanRead)
async def update_plan(body: PlanUpdate, context: PlanEditor, db: DBSession):
    return await PlanService(db).update(
        context.plan_id,
        context.role,
        title=body.title,
        description=body.description,
    )


@router.delete("/{plan_id}")
async def delete_plan(context: PlanOwner, db: DBSession):
    """Delete a plan together with its members, invitations and notes."""
    if not await PlanService(db).delete(context.plan_id):
        raise NotFoundError("Plan")
    return {"success": True}

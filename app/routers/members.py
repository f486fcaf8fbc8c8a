"""
Plan members router.

Every endpoint runs behind authentication and the plan access check; the
resolved PlanContext is handed to the membership service explicitly.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.deps import DBSession, PlanAccess, PlanOwner
from app.errors import NotFoundError
from app.models.membership import PlanRole
from app.schemas.member import (
    InviteMemberRequest,
    MemberRead,
    MembersWithInvitations,
    UpdateMemberRoleRequest,
)
from app.services.members import MemberService

router = APIRouter(prefix="/plans/{plan_id}/members", tags=["members"])


@router.get("", response_model=MembersWithInvitations)
async def list_members(context: PlanAccess, db: DBSession):
    """List members and pending invitations of a plan."""
    return await MemberService(db).list_by_plan(context.plan_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_202_ACCEPTED: {"description": "Invitation stored until the user signs up"}},
)
async def invite_member(body: InviteMemberRequest, context: PlanOwner, db: DBSession):
    """Invite a user by email.

    Returns 201 with the member when the account exists, or 202 with a
    pending summary when the invitation waits for signup.
    """
    result = await MemberService(db).invite(
        context.plan_id,
        body.email,
        PlanRole(body.role),
        invited_by=context.user_id,
    )

    if result.type == "member":
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content=result.member.model_dump(mode="json"),
        )
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content=result.pending.model_dump(mode="json"),
    )


@router.delete("/invitations/{email}")
async def cancel_invitation(email: str, context: PlanOwner, db: DBSession):
    """Cancel a pending invitation."""
    if not await MemberService(db).cancel_invitation(context.plan_id, email):
        raise NotFoundError("Invitation")
    return {"success": True}


@router.put("/{user_id}", response_model=MemberRead)
async def update_member_role(
    user_id: int,
    body: UpdateMemberRoleRequest,
    context: PlanOwner,
    db: DBSession,
):
    return await MemberService(db).update_role(context.plan_id, user_id, PlanRole(body.role))


@router.delete("/{user_id}")
async def remove_member(user_id: int, context: PlanAccess, db: DBSession):
    """Remove a member, or leave the plan when removing yourself."""
    removed = await MemberService(db).remove(
        context.plan_id,
        user_id,
        requesting_user_id=context.user_id,
        requesting_user_role=context.role,
    )
    return {"success": removed}

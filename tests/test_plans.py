"""Tests for plan listing, creation, update and deletion."""

import pytest
from sqlalchemy import func, select

from app.errors import NotFoundError, QuotaExceededError
from app.models import Note, PendingInvitation, Plan, PlanMember, PlanRole
from app.services.members import MemberService
from app.services.plans import PlanService
from app.settings import settings
from tests.factories import add_member, create_user

pytestmark = pytest.mark.asyncio


async def test_create_adds_owner_membership(db):
    alice = await create_user(db, "alice@example.com")

    plan = await PlanService(db).create("  Road trip ", "Summer", alice.id)

    assert plan.title == "Road trip"
    assert plan.role == PlanRole.OWNER
    assert plan.owner_id == alice.id
    role = await db.scalar(
        select(PlanMember.role).where(PlanMember.plan_id == plan.id, PlanMember.user_id == alice.id)
    )
    assert role == "owner"


async def test_create_enforces_owned_plan_quota(db, monkeypatch):
    monkeypatch.setattr(settings, "user_plan_quota", 2)
    alice = await create_user(db, "alice@example.com")
    service = PlanService(db)
    await service.create("One", None, alice.id)
    await service.create("Two", None, alice.id)

    with pytest.raises(QuotaExceededError) as exc_info:
        await service.create("Three", None, alice.id)

    assert exc_info.value.details == {"limit": 2, "current": 2, "resource": "plans"}


async def test_list_by_user_includes_shared_plans_with_roles(db):
    alice = await create_user(db, "alice@example.com")
    bob = await create_user(db, "bob@example.com")
    service = PlanService(db)
    mine = await service.create("Mine", None, bob.id)
    shared = await service.create("Shared", None, alice.id)
    await service.create("Private", None, alice.id)
    await add_member(db, await service.get(shared.id), bob, PlanRole.VIEWER)

    plans, total = await service.list_by_user(bob.id)

    assert total == 2
    assert {(p.id, p.role) for p in plans} == {
        (mine.id, PlanRole.OWNER),
        (shared.id, PlanRole.VIEWER),
    }


async def test_list_by_user_paginates(db):
    alice = await create_user(db, "alice@example.com")
    service = PlanService(db)
    for i in range(5):
        await service.create(f"Plan {i}", None, alice.id)

    first, total = await service.list_by_user(alice.id, page=1, limit=2)
    last, _ = await service.list_by_user(alice.id, page=3, limit=2)

    assert total == 5
    assert len(first) == 2
    assert len(last) == 1


async def test_get_details(db):
    alice = await create_user(db, "alice@example.com", "Alice")
    bob = await create_user(db, "bob@example.com", "Bob")
    service = PlanService(db)
    plan = await service.create("Trip", None, alice.id)
    await MemberService(db).invite(plan.id, bob.email, PlanRole.EDITOR, alice.id)
    db.add(Note(plan_id=plan.id, user_id=alice.id, type="todo", content={"items": []}))
    await db.commit()

    details = await service.get_details(plan.id, PlanRole.EDITOR)

    assert details.role == PlanRole.EDITOR
    assert [n.type for n in details.notes] == ["todo"]
    assert [(m.name, m.role) for m in details.members] == [
        ("Alice", PlanRole.OWNER),
        ("Bob", PlanRole.EDITOR),
    ]


async def test_update(db):
    alice = await create_user(db, "alice@example.com")
    service = PlanService(db)
    plan = await service.create("Trip", "old", alice.id)

    updated = await service.update(plan.id, PlanRole.OWNER, description="new")

    assert updated.title == "Trip"
    assert updated.description == "new"


async def test_update_missing_plan(db):
    with pytest.raises(NotFoundError):
        await PlanService(db).update(404, PlanRole.OWNER, title="x")


async def test_delete_cascades(db):
    alice = await create_user(db, "alice@example.com")
    bob = await create_user(db, "bob@example.com")
    service = PlanService(db)
    plan = await service.create("Trip", None, alice.id)
    members = MemberService(db)
    await members.invite(plan.id, bob.email, PlanRole.EDITOR, alice.id)
    await members.invite(plan.id, "dave@example.com", PlanRole.VIEWER, alice.id)
    db.add(Note(plan_id=plan.id, user_id=bob.id, type="text", content={"text": "hi"}))
    await db.commit()

    assert await service.delete(plan.id) is True
    assert await service.delete(plan.id) is False

    for model in (Plan, PlanMember, PendingInvitation, Note):
        assert await db.scalar(select(func.count()).select_from(model)) == 0

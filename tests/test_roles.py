"""Tests for plan role ordering and effective role resolution."""

import pytest

from app.models.membership import INVITABLE_ROLES, PlanRole
from app.services.roles import resolve_role
from tests.factories import add_member, create_plan, create_user


class TestPlanRoleOrdering:
    """Roles compare by rank, owner > editor > viewer."""

    def test_owner_satisfies_every_role(self):
        assert PlanRole.OWNER.at_least(PlanRole.OWNER)
        assert PlanRole.OWNER.at_least(PlanRole.EDITOR)
        assert PlanRole.OWNER.at_least(PlanRole.VIEWER)

    def test_editor_is_below_owner(self):
        assert PlanRole.EDITOR.at_least(PlanRole.VIEWER)
        assert not PlanRole.EDITOR.at_least(PlanRole.OWNER)

    def test_viewer_only_satisfies_viewer(self):
        assert PlanRole.VIEWER.at_least(PlanRole.VIEWER)
        assert not PlanRole.VIEWER.at_least(PlanRole.EDITOR)

    def test_accepts_raw_strings(self):
        assert PlanRole("editor").at_least("viewer")

    def test_owner_is_not_invitable(self):
        assert INVITABLE_ROLES == {PlanRole.EDITOR, PlanRole.VIEWER}
        assert not PlanRole.OWNER.is_invitable


@pytest.mark.asyncio
class TestResolveRole:
    """Effective role is derived from the plan's owner and membership rows."""

    async def test_creator_is_owner(self, db):
        alice = await create_user(db, "alice@example.com")
        plan = await create_plan(db, alice)

        resolution = await resolve_role(db, plan.id, alice.id)

        assert resolution.plan_exists
        assert resolution.role == PlanRole.OWNER
        assert resolution.has_access

    async def test_member_gets_row_role(self, db):
        alice = await create_user(db, "alice@example.com")
        bob = await create_user(db, "bob@example.com")
        plan = await create_plan(db, alice)
        await add_member(db, plan, bob, PlanRole.EDITOR)

        resolution = await resolve_role(db, plan.id, bob.id)

        assert resolution.role == PlanRole.EDITOR

    async def test_stranger_has_no_role(self, db):
        alice = await create_user(db, "alice@example.com")
        carol = await create_user(db, "carol@example.com")
        plan = await create_plan(db, alice)

        resolution = await resolve_role(db, plan.id, carol.id)

        assert resolution.plan_exists
        assert resolution.role is None
        assert not resolution.has_access

    async def test_missing_plan(self, db):
        alice = await create_user(db, "alice@example.com")

        resolution = await resolve_role(db, 9999, alice.id)

        assert not resolution.plan_exists
        assert resolution.role is None

    async def test_creator_is_owner_without_member_row(self, db):
        """Ownership does not depend on the owner's membership row."""
        from sqlalchemy import delete

        from app.models import PlanMember

        alice = await create_user(db, "alice@example.com")
        plan = await create_plan(db, alice)
        await db.execute(delete(PlanMember).where(PlanMember.plan_id == plan.id))
        await db.commit()

        resolution = await resolve_role(db, plan.id, alice.id)

        assert resolution.role == PlanRole.OWNER

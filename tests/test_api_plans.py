"""HTTP tests for plan and note endpoints behind the access gate."""

import pytest

from app.models import Note, PlanRole
from tests.factories import add_member, auth_headers, create_plan, create_user

pytestmark = pytest.mark.asyncio


async def _plan_with_roles(db):
    alice = await create_user(db, "alice@example.com", "Alice", with_session=True)
    bob = await create_user(db, "bob@example.com", "Bob", with_session=True)
    carol = await create_user(db, "carol@example.com", "Carol", with_session=True)
    plan = await create_plan(db, alice)
    await add_member(db, plan, bob, PlanRole.EDITOR)
    await add_member(db, plan, carol, PlanRole.VIEWER)
    return alice, bob, carol, plan


async def _add_note(db, plan, author, content=None):
    note = Note(plan_id=plan.id, user_id=author.id, type="text", content=content or {"text": "hello"})
    db.add(note)
    await db.commit()
    return note


class TestPlanEndpoints:
    async def test_create_and_list(self, async_client, db):
        alice = await create_user(db, "alice@example.com", with_session=True)

        created = await async_client.post(
            "/plans",
            json={"title": "Trip", "description": "Summer"},
            headers=auth_headers(alice),
        )
        listing = await async_client.get("/plans?page=1&limit=10", headers=auth_headers(alice))

        assert created.status_code == 201
        assert created.json()["role"] == "owner"
        body = listing.json()
        assert [p["title"] for p in body["data"]] == ["Trip"]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "total_pages": 1}

    async def test_list_limit_is_bounded(self, async_client, db):
        alice = await create_user(db, "alice@example.com", with_session=True)

        response = await async_client.get("/plans?limit=101", headers=auth_headers(alice))

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "limit"

    async def test_empty_title_is_rejected(self, async_client, db):
        alice = await create_user(db, "alice@example.com", with_session=True)

        response = await async_client.post("/plans", json={"title": ""}, headers=auth_headers(alice))

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_viewer_reads_details_with_own_role(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)
        await _add_note(db, plan, alice)

        response = await async_client.get(f"/plans/{plan.id}", headers=auth_headers(carol))

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "viewer"
        assert len(body["notes"]) == 1
        assert [m["role"] for m in body["members"]] == ["owner", "editor", "viewer"]

    async def test_viewer_cannot_update(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)

        response = await async_client.put(f"/plans/{plan.id}", json={"title": "Mine"}, headers=auth_headers(carol))

        assert response.status_code == 403
        assert response.json()["message"] == "Viewers cannot perform this action"

    async def test_editor_updates(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)

        response = await async_client.put(f"/plans/{plan.id}", json={"title": "Ours"}, headers=auth_headers(bob))

        assert response.status_code == 200
        assert response.json()["title"] == "Ours"
        assert response.json()["role"] == "editor"

    async def test_only_owner_deletes(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)

        denied = await async_client.delete(f"/plans/{plan.id}", headers=auth_headers(bob))
        deleted = await async_client.delete(f"/plans/{plan.id}", headers=auth_headers(alice))
        gone = await async_client.get(f"/plans/{plan.id}", headers=auth_headers(alice))

        assert denied.status_code == 403
        assert denied.json()["message"] == "Only the plan owner can perform this action"
        assert deleted.status_code == 200
        assert gone.status_code == 404

    async def test_non_integer_plan_id(self, async_client, db):
        alice = await create_user(db, "alice@example.com", with_session=True)

        response = await async_client.get("/plans/abc", headers=auth_headers(alice))

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestNoteEndpoints:
    async def test_editor_creates_note(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)

        response = await async_client.post(
            "/notes",
            json={"plan_id": plan.id, "type": "todo", "content": {"items": ["tent"]}},
            headers=auth_headers(bob),
        )

        assert response.status_code == 201
        assert response.json()["user_id"] == bob.id

    async def test_viewer_cannot_create_note(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)

        response = await async_client.post(
            "/notes",
            json={"plan_id": plan.id, "type": "text", "content": {"text": "hi"}},
            headers=auth_headers(carol),
        )

        assert response.status_code == 403

    async def test_note_on_missing_plan(self, async_client, db):
        alice = await create_user(db, "alice@example.com", with_session=True)

        response = await async_client.post(
            "/notes",
            json={"plan_id": 4242, "type": "text", "content": {}},
            headers=auth_headers(alice),
        )

        assert response.status_code == 404

    async def test_unknown_note_type(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)

        response = await async_client.post(
            "/notes",
            json={"plan_id": plan.id, "type": "poll", "content": {}},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400

    async def test_list_and_filter(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)
        await _add_note(db, plan, alice)

        everything = await async_client.get(f"/notes/plan/{plan.id}", headers=auth_headers(carol))
        todos = await async_client.get(f"/notes/plan/{plan.id}?type=todo", headers=auth_headers(carol))

        assert len(everything.json()["data"]) == 1
        assert todos.json()["data"] == []

    async def test_stranger_cannot_read_note(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)
        stranger = await create_user(db, "eve@example.com", with_session=True)
        note = await _add_note(db, plan, alice)

        response = await async_client.get(f"/notes/{note.id}", headers=auth_headers(stranger))

        assert response.status_code == 403
        assert response.json()["message"] == "You don't have access to this note"

    async def test_missing_note(self, async_client, db):
        alice = await create_user(db, "alice@example.com", with_session=True)

        response = await async_client.get("/notes/31337", headers=auth_headers(alice))

        assert response.status_code == 404
        assert response.json()["message"] == "Note not found"

    async def test_editor_merges_content(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)
        note = await _add_note(db, plan, alice, {"text": "hello", "pinned": False})

        response = await async_client.put(
            f"/notes/{note.id}",
            json={"content": {"pinned": True}},
            headers=auth_headers(bob),
        )

        assert response.status_code == 200
        assert response.json()["content"] == {"text": "hello", "pinned": True}

    async def test_viewer_cannot_delete_note(self, async_client, db):
        alice, bob, carol, plan = await _plan_with_roles(db)
        note = await _add_note(db, plan, alice)

        denied = await async_client.delete(f"/notes/{note.id}", headers=auth_headers(carol))
        deleted = await async_client.delete(f"/notes/{note.id}", headers=auth_headers(bob))

        assert denied.status_code == 403
        assert deleted.json() == {"success": True}

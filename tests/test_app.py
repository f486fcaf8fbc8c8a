"""Tests for operational endpoints, middleware and error handling."""

import pytest
from starlette.requests import Request

from app.deps import PlanAccess, get_plan_context
from app.errors import ConfigurationError
from app.main import app
from tests.factories import auth_headers, create_user

pytestmark = pytest.mark.asyncio


async def test_health(async_client):
    for path in ("/health", "/healthz"):
        response = await async_client.get(path)
        assert response.json() == {"status": "healthy"}


async def test_version(async_client):
    response = await async_client.get("/version")

    assert set(response.json()) == {"version", "build_sha"}


async def test_request_id_is_echoed(async_client):
    response = await async_client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


async def test_request_id_is_generated(async_client):
    response = await async_client.get("/health")

    assert response.headers["X-Request-ID"]


async def test_unknown_route(async_client):
    response = await async_client.get("/nowhere")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


async def test_plan_context_requires_plan_id_path_param(db):
    user = await create_user(db, "alice@example.com")
    request = Request({"type": "http", "path_params": {}, "headers": []})

    with pytest.raises(ConfigurationError):
        await get_plan_context(request, user, db)


async def test_misconfigured_guard_returns_generic_500(async_client, db):
    alice = await create_user(db, "alice@example.com", with_session=True)

    async def misconfigured(context: PlanAccess):
        return {"plan": context.plan_id}

    app.add_api_route("/misconfigured", misconfigured)
    try:
        response = await async_client.get("/misconfigured", headers=auth_headers(alice))
    finally:
        app.router.routes.pop()

    assert response.status_code == 500
    assert response.json() == {"code": "CONFIGURATION_ERROR", "message": "Something went wrong"}

"""Integration tests for service-level HTTP behaviour: health, profiles, errors."""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from tests.conftest import _auth_headers, _seed_user

pytestmark = pytest.mark.asyncio


class TestHealthEndpoints:
    """Test /health and /ready liveness/readiness probes."""

    async def test_health_check(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["service"] == "rental-access-service"

    async def test_readiness_check(self, client):
        resp = await client.get("/ready")
        assert resp.status_code == 200
        assert resp.json()["checks"] == {"database": "ok", "redis": "ok"}

    async def test_ping(self, client):
        resp = await client.get("/api/v1/ping")
        assert resp.json() == {"ping": "pong"}


class TestMiddleware:
    async def test_request_id_echoed(self, client):
        resp = await client.get("/health", headers={"X-Request-ID": "req-123"})
        assert resp.headers["x-request-id"] == "req-123"

    async def test_request_id_generated(self, client):
        resp = await client.get("/health")
        assert resp.headers["x-request-id"]

    async def test_security_headers(self, client):
        resp = await client.get("/health")
        assert resp.headers["x-content-type-options"] == "nosniff"
        assert resp.headers["x-frame-options"] == "DENY"


class TestCreateProfile:
    async def test_signup_creates_profile_and_role(self, client, store):
        user_id = str(uuid.uuid4())
        headers = _auth_headers(user_id, email="new@example.com")

        resp = await client.post(
            "/api/v1/profiles",
            json={"email": "new@example.com", "full_name": "New Landlord", "role": "landlord"},
            headers=headers,
        )

        assert resp.status_code == 201
        assert resp.json()["role"] == "landlord"
        assert store.roles_for(user_id) == ["landlord"]

        home = (await client.get("/api/v1/navigation/home", headers=headers)).json()
        assert home["redirect_to"] == "/landlord"

    async def test_admin_cannot_be_chosen(self, client, store):
        headers = _auth_headers(str(uuid.uuid4()))
        resp = await client.post(
            "/api/v1/profiles",
            json={"email": "x@example.com", "full_name": "X", "role": "admin"},
            headers=headers,
        )
        assert resp.status_code == 422

    async def test_duplicate_is_409(self, client, store):
        user_id, headers = _seed_user(store, "renter", email="dup@example.com")

        resp = await client.post(
            "/api/v1/profiles",
            json={"email": "dup@example.com", "full_name": "Dup"},
            headers=headers,
        )

        assert resp.status_code == 409

    async def test_requires_token(self, client, store):
        resp = await client.post(
            "/api/v1/profiles", json={"email": "x@example.com", "full_name": "X"}
        )
        assert resp.status_code == 401


class TestUnhandledErrors:
    async def test_unexpected_error_does_not_leak(self, client, store):
        # The shared client fixture has already wired app.state
        _, headers = _seed_user(store, "renter")
        store.fail_on.add("touch_sign_in")
        # Raise server errors as responses rather than re-raising into the test
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/v1/auth/signed-in", headers=headers)

        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}

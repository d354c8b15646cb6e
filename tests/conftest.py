"""Shared test fixtures for the rental access service."""

import os

# Set test JWT secret before any app imports trigger Settings() validation.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-for-unit-tests-0123456789")

import uuid  # noqa: E402
from collections.abc import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import fakeredis.aioredis  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.main import app  # noqa: E402
from app.providers import get_profile_repository, get_role_repository  # noqa: E402
from app.rate_limit import limiter  # noqa: E402
from tests.helpers.fakes import (  # noqa: E402
    FakeProfileRepository,
    FakeRoleRepository,
    FakeStore,
)
from tests.helpers.token_factory import create_access_token  # noqa: E402

# ---------------------------------------------------------------------------
# Fake Redis (drop-in async replacement)
# ---------------------------------------------------------------------------


def _make_fake_redis():
    """Create a fakeredis instance that behaves like redis.asyncio.Redis."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


# ---------------------------------------------------------------------------
# Mock DB session
# ---------------------------------------------------------------------------


def _make_mock_session():
    """Create a mock async DB session.

    The mock supports ``async with factory() as session`` used by
    ``get_db_session`` and by the readiness probe (``SELECT 1``).
    """
    session = AsyncMock()
    result_mock = MagicMock()
    result_mock.scalar.return_value = 1
    session.execute.return_value = result_mock
    session.close = AsyncMock()
    session.info = {}
    return session


def _make_mock_session_factory():
    """Return a callable that mimics ``async_sessionmaker().__call__()``."""
    mock_session = _make_mock_session()
    factory = MagicMock()
    ctx = AsyncMock()
    ctx.__aenter__.return_value = mock_session
    factory.return_value = ctx
    return factory, mock_session


# ---------------------------------------------------------------------------
# HTTP client fixture (FastAPI app with mocked infra)
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Per-endpoint limits are process-wide; start every test with a clean slate."""
    limiter.reset()
    yield


@pytest_asyncio.fixture()
async def fake_redis():
    """Provide a fake Redis client."""
    client = _make_fake_redis()
    yield client
    await client.aclose()


@pytest_asyncio.fixture()
async def client(fake_redis) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the FastAPI app.

    Infrastructure (DB, Redis) is mocked so tests run without devstack.
    """
    session_factory, _ = _make_mock_session_factory()

    app.state.engine = MagicMock()
    app.state.session_factory = session_factory
    app.state.redis = fake_redis

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def store():
    """In-memory profiles and roles, installed in place of the SQL repositories."""
    data = FakeStore()
    app.dependency_overrides[get_profile_repository] = lambda: FakeProfileRepository(data)
    app.dependency_overrides[get_role_repository] = lambda: FakeRoleRepository(data)
    yield data
    app.dependency_overrides.pop(get_profile_repository, None)
    app.dependency_overrides.pop(get_role_repository, None)


# ---------------------------------------------------------------------------
# Auth helpers: generate JWT tokens directly (no login endpoint needed)
# ---------------------------------------------------------------------------


def _new_user_id() -> str:
    return str(uuid.uuid4())


def _auth_headers(user_id: str, email: str = "", role_claim: str | None = None) -> dict[str, str]:
    """Return Authorization header dict with a valid JWT for *user_id*."""
    token = create_access_token(user_id=user_id, email=email, role=role_claim)
    return {"Authorization": f"Bearer {token}"}


def _seed_user(store: FakeStore, role: str | None, **kwargs) -> tuple[str, dict[str, str]]:
    """Add a profile holding *role* and return ``(user_id, headers)``."""
    user_id = _new_user_id()
    store.add_profile(user_id, role=role, **kwargs)
    return user_id, _auth_headers(user_id)


@pytest.fixture()
def admin_headers(store) -> dict[str, str]:
    """Authorization headers for a seeded admin."""
    _, headers = _seed_user(store, "admin")
    return headers


@pytest.fixture()
def landlord_headers(store) -> dict[str, str]:
    """Authorization headers for a seeded landlord."""
    _, headers = _seed_user(store, "landlord")
    return headers


@pytest.fixture()
def renter_headers(store) -> dict[str, str]:
    """Authorization headers for a seeded renter."""
    _, headers = _seed_user(store, "renter")
    return headers

"""Unit tests for services/profile_service.py."""

import uuid
from types import SimpleNamespace

import pytest

from app.models.user import ProfileStatus
from app.repositories.profile_repository import DuplicateProfileError
from app.schemas.auth import TokenUser
from app.schemas.profile import ProfileCreate
from app.services.profile_service import ProfileService
from tests.helpers.fakes import FakeProfileRepository, FakeRoleRepository, FakeStore


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def service(store):
    return ProfileService(FakeProfileRepository(store), FakeRoleRepository(store))


def _caller() -> TokenUser:
    uid = str(uuid.uuid4())
    return TokenUser(id=uid, email=f"{uid[:8]}@example.com")


class TestCreateProfile:
    async def test_writes_profile_and_role_row(self, store, service):
        user = _caller()
        body = ProfileCreate(email=user.email, full_name="  Jo Tenant ", role="landlord")

        profile = await service.create_profile(user, body)

        assert profile.id == user.id
        assert profile.full_name == "Jo Tenant"
        assert profile.role == "landlord"
        assert store.roles_for(user.id) == ["landlord"]

    async def test_duplicate_raises(self, store, service):
        user = _caller()
        body = ProfileCreate(email=user.email, full_name="Jo")
        await service.create_profile(user, body)

        with pytest.raises(DuplicateProfileError):
            await service.create_profile(user, body)
        assert store.roles_for(user.id) == ["renter"]

    async def test_role_insert_failure_discards_profile(self, store, service):
        from sqlalchemy.exc import SQLAlchemyError

        user = _caller()
        store.fail_on.add("insert_role")

        with pytest.raises(SQLAlchemyError):
            await service.create_profile(user, ProfileCreate(email=user.email, full_name="Jo"))
        assert user.id not in store.profiles


class TestStatus:
    async def test_suspend(self, store, service):
        uid = str(uuid.uuid4())
        store.add_profile(uid, role="renter")

        profile = await service.set_status(uid, ProfileStatus.suspended)

        assert profile.status == "suspended"
        # Role rows are kept so reactivation restores access
        assert store.roles_for(uid) == ["renter"]
        assert uid in store.pending_invalidations

    async def test_unknown_user(self, service):
        assert await service.set_status(str(uuid.uuid4()), ProfileStatus.active) is None


class TestListAndSignIn:
    async def test_list_profiles_paginates(self, store, service):
        for _ in range(3):
            store.add_profile(str(uuid.uuid4()), role="renter")
        filters = SimpleNamespace(role=None, status=None)

        page = await service.list_profiles(filters, page=1, size=2)

        assert page.total == 3
        assert page.pages == 2
        assert len(page.items) == 2

    async def test_record_sign_in(self, store, service):
        uid = str(uuid.uuid4())
        store.add_profile(uid)

        await service.record_sign_in(uid)

        assert store.profiles[uid].last_sign_in_at is not None

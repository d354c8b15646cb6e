"""Unit tests for services/role_service.py against in-memory repositories."""

import uuid

import pytest

from app.auth.session_cache import get_cached_roles, set_cached_roles
from app.errors import DataAccessError, ValidationError
from app.models.user import UserRole
from app.services.role_service import RoleService
from tests.helpers.fakes import FakeProfileRepository, FakeRoleRepository, FakeStore


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def service(store):
    return RoleService(FakeRoleRepository(store), FakeProfileRepository(store))


def _uid() -> str:
    return str(uuid.uuid4())


class TestAssignRole:
    async def test_renter_promoted_to_landlord(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="renter")

        result = await service.assign_role(uid, UserRole.landlord)

        assert result.success is True
        assert result.message == "User role updated successfully"
        assert result.previous_role == "renter"
        assert store.roles_for(uid) == ["landlord"]
        assert store.profiles[uid].role == "landlord"

        resolver = await service.get_resolver(uid)
        assert resolver.has_role("landlord")
        assert not resolver.has_role("renter")

    async def test_replaces_every_existing_role(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="admin", roles=["admin", "landlord", "renter"])

        await service.assign_role(uid, UserRole.renter)

        assert store.roles_for(uid) == ["renter"]

    async def test_idempotent(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="renter")

        first = await service.assign_role(uid, UserRole.renter)
        second = await service.assign_role(uid, UserRole.renter)

        assert first.success and second.success
        assert store.roles_for(uid) == ["renter"]

    async def test_missing_profile_returns_none(self, service):
        assert await service.assign_role(_uid(), UserRole.admin) is None

    async def test_reports_advisory_transition(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="renter")

        result = await service.assign_role(uid, UserRole.admin)

        assert result.success is True
        assert result.transition_allowed is False

    async def test_enforced_transition_raises(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="renter")

        with pytest.raises(ValidationError):
            await service.assign_role(uid, UserRole.admin, enforce_transition=True)
        assert store.roles_for(uid) == ["renter"]


class TestAssignRoleFailures:
    """Every write of a role change is kept or none is."""

    async def test_insert_failure_rolls_back_delete_and_profile(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="renter")
        store.fail_on.add("insert_role")

        result = await service.assign_role(uid, UserRole.landlord)

        assert result.success is False
        assert result.failed_step == "insert_role"
        assert result.message.startswith("Error creating user role: ")
        assert store.profiles[uid].role == "renter"
        assert store.roles_for(uid) == ["renter"]

    async def test_profile_update_failure(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="landlord")
        store.fail_on.add("update_role")

        result = await service.assign_role(uid, UserRole.renter)

        assert result.success is False
        assert result.failed_step == "update_profile"
        assert result.message.startswith("Error updating profile: ")
        assert store.roles_for(uid) == ["landlord"]

    async def test_delete_failure(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="landlord")
        store.fail_on.add("delete_roles")

        result = await service.assign_role(uid, UserRole.renter)

        assert result.failed_step == "delete_roles"
        assert result.message.startswith("Error removing existing roles: ")

    async def test_profile_load_failure(self, store, service):
        store.fail_on.add("get_by_id")

        result = await service.assign_role(_uid(), UserRole.renter)

        assert result.success is False
        assert result.failed_step == "load_profile"

    async def test_failure_keeps_role_cache(self, store, fake_redis):
        uid = _uid()
        store.add_profile(uid, role="renter")
        store.fail_on.add("insert_role")
        await set_cached_roles(fake_redis, uid, {"roles": ["renter"], "profile": None}, 60)
        service = RoleService(FakeRoleRepository(store), FakeProfileRepository(store), fake_redis)

        await service.assign_role(uid, UserRole.landlord)

        assert await get_cached_roles(fake_redis, uid) is not None
        assert uid not in store.pending_invalidations


class TestCacheInvalidation:
    async def test_success_clears_cached_roles(self, store, fake_redis):
        redis = fake_redis
        uid = _uid()
        store.add_profile(uid, role="renter")
        await set_cached_roles(redis, uid, {"roles": ["renter"], "profile": None}, 60)
        service = RoleService(FakeRoleRepository(store), FakeProfileRepository(store), redis)

        await service.assign_role(uid, UserRole.landlord)

        assert await get_cached_roles(redis, uid) is None
        assert uid in store.pending_invalidations


class TestValidateUserRole:
    async def test_holds_role(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="landlord", roles=["landlord", "renter"])

        check = await service.validate_user_role(uid, UserRole.landlord)

        assert check.is_valid is True
        assert check.current_roles == ["landlord", "renter"]
        assert check.error is None

    async def test_missing_role(self, store, service):
        uid = _uid()
        store.add_profile(uid, role="renter")

        check = await service.validate_user_role(uid, UserRole.admin)

        assert check.is_valid is False
        assert check.error == "User does not have required role: admin"

    async def test_load_failure(self, store, service):
        store.fail_on.add("get_roles")

        check = await service.validate_user_role(_uid(), UserRole.admin)

        assert check.is_valid is False
        assert check.current_roles == []
        assert check.error.startswith("Error fetching user roles: ")

    async def test_get_resolver_fails_closed(self, store, service):
        store.fail_on.add("get_roles")

        resolver = await service.get_resolver(_uid())

        assert resolver.load_failed is True


class TestUsersByRole:
    async def test_joins_profiles(self, store, service):
        a, b = _uid(), _uid()
        store.add_profile(a, email="a@example.com", role="landlord")
        store.add_profile(b, email="b@example.com", role="renter")

        listing = await service.get_users_by_role(UserRole.landlord)

        assert listing.total == 1
        assert listing.items[0].user_id == a
        assert listing.items[0].profile.email == "a@example.com"

    async def test_failure_raises_data_access_error(self, store, service):
        store.fail_on.add("get_users_by_role")

        with pytest.raises(DataAccessError):
            await service.get_users_by_role(UserRole.admin)


class TestReconcile:
    async def test_report_and_backfill(self, store, service):
        synced, unsynced = _uid(), _uid()
        store.add_profile(synced, role="renter")
        store.add_profile(unsynced, role="landlord", roles=[])

        report = await service.consistency_report()
        assert report.total == 1
        assert report.items[0].user_id == unsynced

        assert await service.reconcile() == 1
        assert store.roles_for(unsynced) == ["landlord"]
        assert (await service.consistency_report()).total == 0

    async def test_reconcile_is_all_or_nothing(self, store, service):
        store.add_profile(_uid(), role="landlord", roles=[])
        store.fail_on.add("insert_role")

        with pytest.raises(DataAccessError):
            await service.reconcile()
        assert store.roles == set()

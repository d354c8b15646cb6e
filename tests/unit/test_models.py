"""Unit tests for database models and enums."""

import pytest

from app.models import ROLE_PRIORITY, Profile, ProfileStatus, RoleAssignment, UserRole


class TestUserRoleEnum:
    def test_all_roles_defined(self):
        assert {r.value for r in UserRole} == {"admin", "landlord", "renter"}

    def test_string_coercion(self):
        assert UserRole.admin == "admin"

    def test_invalid_role_raises(self):
        with pytest.raises(ValueError):
            UserRole("owner")

    def test_priority_order(self):
        assert ROLE_PRIORITY == (UserRole.admin, UserRole.landlord, UserRole.renter)


class TestProfileStatusEnum:
    def test_statuses(self):
        assert ProfileStatus("active") == ProfileStatus.active
        assert ProfileStatus("suspended") == ProfileStatus.suspended
        assert len(ProfileStatus) == 2


class TestTables:
    def test_role_table_key_is_user_and_role(self):
        pk = [c.name for c in RoleAssignment.__table__.primary_key.columns]
        assert pk == ["user_id", "role"]

    def test_role_rows_cascade_with_profile(self):
        fk = next(iter(RoleAssignment.__table__.c.user_id.foreign_keys))
        assert fk.column.table.name == "profiles"
        assert fk.ondelete == "CASCADE"

    def test_profile_role_is_nullable(self):
        assert Profile.__table__.c.role.nullable is True

    def test_is_active(self):
        assert Profile(id="u", email="e", status="active").is_active
        assert not Profile(id="u", email="e", status="suspended").is_active

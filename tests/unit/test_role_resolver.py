"""Unit tests for core/role_resolver.py."""

import pytest

from app.core.role_resolver import RoleResolver
from app.models.user import UserRole


class TestHasRole:
    """Role checks consult only the loaded role set."""

    @pytest.mark.parametrize("role", ["admin", "landlord", "renter"])
    def test_empty_role_set_grants_nothing(self, role):
        resolver = RoleResolver([], profile_role="admin")
        assert resolver.has_role(role) is False

    def test_profile_role_is_never_consulted(self):
        resolver = RoleResolver(["renter"], profile_role="admin")
        assert resolver.has_role("admin") is False
        assert resolver.has_role("renter") is True

    def test_accepts_enum_members(self):
        resolver = RoleResolver(["landlord"])
        assert resolver.has_role(UserRole.landlord)

    def test_unknown_role_names_are_ignored(self):
        resolver = RoleResolver(["superuser", "renter"])
        assert resolver.roles == frozenset({UserRole.renter})
        assert resolver.has_role("superuser") is False

    def test_has_any_role(self):
        resolver = RoleResolver(["landlord"])
        assert resolver.has_any_role(["admin", "landlord"])
        assert not resolver.has_any_role(["admin"])
        assert not resolver.has_any_role([])

    def test_has_valid_role(self):
        assert RoleResolver(["renter"]).has_valid_role()
        assert not RoleResolver([]).has_valid_role()


class TestPrimaryRole:
    """Priority admin > landlord > renter picks the landing role."""

    def test_admin_wins(self):
        resolver = RoleResolver(["renter", "admin", "landlord"])
        assert resolver.primary_role == UserRole.admin

    def test_landlord_over_renter(self):
        assert RoleResolver(["renter", "landlord"]).primary_role == UserRole.landlord

    def test_empty_defaults_to_renter_for_display(self):
        resolver = RoleResolver([])
        assert resolver.primary_role == UserRole.renter
        assert resolver.highest_role() is None
        # The display default grants nothing
        assert resolver.has_role("renter") is False

    def test_sorted_roles_follow_priority(self):
        resolver = RoleResolver(["renter", "admin"])
        assert resolver.sorted_roles() == [UserRole.admin, UserRole.renter]


class TestUnavailable:
    """A failed load fails closed."""

    def test_unavailable_holds_no_roles(self):
        resolver = RoleResolver.unavailable()
        assert resolver.load_failed is True
        assert resolver.roles == frozenset()
        assert not resolver.has_role("renter")

    def test_load_failed_discards_supplied_roles(self):
        resolver = RoleResolver(["admin"], load_failed=True)
        assert not resolver.has_role("admin")

    def test_repr_lists_roles(self):
        assert "admin,renter" in repr(RoleResolver(["renter", "admin"]))

"""Role and account-status enums for RBAC.

User identities are owned by the external auth provider; only the roles a
user holds and the moderation status of their profile live here.
"""

import enum


class UserRole(enum.StrEnum):
    """User roles for RBAC."""

    admin = "admin"
    landlord = "landlord"
    renter = "renter"


class ProfileStatus(enum.StrEnum):
    """Moderation status of a profile (soft delete)."""

    active = "active"
    suspended = "suspended"


# Highest priority first. Used only to pick a landing page, never to
# grant one role's permissions to another.
ROLE_PRIORITY: tuple[UserRole, ...] = (UserRole.admin, UserRole.landlord, UserRole.renter)

DEFAULT_ROLE = UserRole.renter

"""Database models package."""

from app.models.base import Base
from app.models.profile import Profile, RoleAssignment
from app.models.user import DEFAULT_ROLE, ROLE_PRIORITY, ProfileStatus, UserRole

__all__ = [
    # Base
    "Base",
    # Models
    "Profile",
    "RoleAssignment",
    # Enums
    "ProfileStatus",
    "UserRole",
    # Constants
    "ROLE_PRIORITY",
    "DEFAULT_ROLE",
]

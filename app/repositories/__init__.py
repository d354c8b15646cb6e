"""Database repositories for data access."""
from app.repositories.profile_repository import DuplicateProfileError, ProfileRepository
from app.repositories.role_repository import RoleRepository

__all__ = [
    "DuplicateProfileError",
    "ProfileRepository",
    "RoleRepository",
]

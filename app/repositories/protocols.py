"""Protocol definitions for repository interfaces.

These protocols enable type-safe fakes in tests and decouple service
layer code from concrete SQLAlchemy implementations.
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from app.filters.profile import ProfileFilter
from app.models.profile import Profile
from app.models.user import ProfileStatus, UserRole


class RoleRepositoryProtocol(Protocol):
    """Interface for role-assignment data access."""

    def savepoint(self) -> AbstractAsyncContextManager[Any]: ...

    def invalidate_after_commit(self, user_id: str) -> None: ...

    async def get_roles(self, user_id: str) -> list[str]: ...

    async def delete_roles(self, user_id: str) -> int: ...

    async def insert_role(self, user_id: str, role: UserRole) -> None: ...

    async def get_users_by_role(self, role: UserRole) -> list[dict[str, Any]]: ...

    async def find_unsynced_profiles(self) -> list[tuple[str, str]]: ...


class ProfileRepositoryProtocol(Protocol):
    """Interface for profile data access."""

    async def get_by_id(self, user_id: str) -> Profile | None: ...

    async def get_all(
        self, filters: ProfileFilter, page: int = 1, size: int = 50
    ) -> tuple[list[Profile], int]: ...

    async def create(
        self,
        *,
        user_id: str,
        email: str,
        full_name: str | None,
        role: UserRole | None,
    ) -> Profile: ...

    async def update_role(self, user_id: str, role: UserRole) -> Profile | None: ...

    async def set_status(self, user_id: str, status: ProfileStatus) -> Profile | None: ...

    async def touch_sign_in(self, user_id: str) -> None: ...

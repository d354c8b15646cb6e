"""Service layer for profiles and account moderation."""

import logging
from math import ceil

from redis.asyncio import Redis

from app.auth.session_cache import clear_cached_roles
from app.filters.profile import ProfileFilter
from app.models.user import ProfileStatus, UserRole
from app.repositories.protocols import ProfileRepositoryProtocol, RoleRepositoryProtocol
from app.schemas.auth import TokenUser
from app.schemas.profile import ProfileCreate, ProfileListResponse, ProfileResponse

logger = logging.getLogger(__name__)


class ProfileService:
    """Version-agnostic business logic for profiles."""

    def __init__(
        self,
        profiles: ProfileRepositoryProtocol,
        roles: RoleRepositoryProtocol,
        redis: Redis | None = None,
    ):
        self._profiles = profiles
        self._roles = roles
        self._redis = redis

    async def _drop_cached_roles(self, user_id: str) -> None:
        await clear_cached_roles(self._redis, user_id)
        self._roles.invalidate_after_commit(user_id)

    async def list_profiles(
        self,
        filters: ProfileFilter,
        page: int = 1,
        size: int = 50,
    ) -> ProfileListResponse:
        profiles, total = await self._profiles.get_all(filters, page=page, size=size)
        return ProfileListResponse(
            items=[ProfileResponse.model_validate(p) for p in profiles],
            total=total,
            page=page,
            size=size,
            pages=ceil(total / size) if size > 0 else 0,
        )

    async def create_profile(self, user: TokenUser, body: ProfileCreate) -> ProfileResponse:
        """Create the caller's profile and its role row together.

        Raises:
            DuplicateProfileError: If the caller already has a profile.
        """
        role = UserRole(body.role)
        async with self._roles.savepoint():
            profile = await self._profiles.create(
                user_id=user.id,
                email=str(body.email),
                full_name=body.full_name,
                role=role,
            )
            await self._roles.insert_role(user.id, role)

        await self._drop_cached_roles(user.id)
        logger.info("Created profile for user %s with role %s", user.id, role.value)
        return ProfileResponse.model_validate(profile)

    async def set_status(self, user_id: str, status: ProfileStatus) -> ProfileResponse | None:
        """Suspend or reactivate *user_id*. Returns ``None`` if not found."""
        profile = await self._profiles.set_status(user_id, status)
        if profile is None:
            return None

        await self._drop_cached_roles(user_id)
        logger.info("Profile %s status set to %s", user_id, status.value)
        return ProfileResponse.model_validate(profile)

    async def record_sign_in(self, user_id: str) -> None:
        await self._profiles.touch_sign_in(user_id)

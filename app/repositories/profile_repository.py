"""Repository for profile data access."""

from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.filters.profile import ProfileFilter
from app.models.profile import Profile
from app.models.user import ProfileStatus, UserRole


class DuplicateProfileError(Exception):
    """Raised when a profile already exists for the user id or email."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Profile for user '{user_id}' already exists")


class ProfileRepository:
    """Data access layer for profiles."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Profile | None:
        """Get a profile by user id."""
        result = await self.session.execute(select(Profile).where(Profile.id == user_id))
        return result.scalar_one_or_none()

    async def get_all(
        self,
        filters: ProfileFilter,
        page: int = 1,
        size: int = 50,
    ) -> tuple[list[Profile], int]:
        """Get profiles with declarative filtering and pagination."""
        query = filters.filter(select(Profile))
        count_query = filters.filter(select(func.count()).select_from(Profile))

        total = await self.session.scalar(count_query) or 0

        query = filters.sort(query)
        if not filters.order_by:
            query = query.order_by(Profile.created_at.desc())
        query = query.offset((page - 1) * size).limit(size)

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def create(
        self,
        *,
        user_id: str,
        email: str,
        full_name: str | None,
        role: UserRole | None,
    ) -> Profile:
        """Create a new profile.

        Raises:
            DuplicateProfileError: If the id or email is already taken.
        """
        profile = Profile(
            id=user_id,
            email=email,
            full_name=full_name,
            role=role.value if role else None,
            status=ProfileStatus.active.value,
        )
        self.session.add(profile)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateProfileError(user_id) from exc
        await self.session.refresh(profile)
        return profile

    async def update_role(self, user_id: str, role: UserRole) -> Profile | None:
        """Set the denormalized role column."""
        profile = await self.get_by_id(user_id)
        if not profile:
            return None

        profile.role = role.value
        await self.session.flush()
        return profile

    async def set_status(self, user_id: str, status: ProfileStatus) -> Profile | None:
        """Suspend or reactivate a profile."""
        profile = await self.get_by_id(user_id)
        if not profile:
            return None

        profile.status = status.value
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def touch_sign_in(self, user_id: str) -> None:
        """Record the time of the user's latest sign-in."""
        profile = await self.get_by_id(user_id)
        if profile:
            profile.last_sign_in_at = datetime.now(UTC)
            await self.session.flush()

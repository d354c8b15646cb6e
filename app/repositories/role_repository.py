"""Repository for role-assignment data access."""

from contextlib import AbstractAsyncContextManager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.session_cache import ROLE_INVALIDATIONS
from app.models.profile import Profile, RoleAssignment
from app.models.user import UserRole


class RoleRepository:
    """Data access layer for the ``user_roles`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def savepoint(self) -> AbstractAsyncContextManager[Any]:
        """Nested transaction; rolls back its writes if the block raises."""
        return self.session.begin_nested()

    def invalidate_after_commit(self, user_id: str) -> None:
        """Queue *user_id*'s cached roles to be dropped once the session commits."""
        self.session.info.setdefault(ROLE_INVALIDATIONS, set()).add(user_id)

    async def get_roles(self, user_id: str) -> list[str]:
        """Return the role names held by *user_id*."""
        result = await self.session.execute(
            select(RoleAssignment.role).where(RoleAssignment.user_id == user_id)
        )
        return [str(role) for role in result.scalars().all()]

    async def delete_roles(self, user_id: str) -> int:
        """Delete every role row for *user_id*. Returns the number removed."""
        result = await self.session.execute(
            delete(RoleAssignment).where(RoleAssignment.user_id == user_id)
        )
        await self.session.flush()
        return result.rowcount or 0

    async def insert_role(self, user_id: str, role: UserRole) -> None:
        """Insert one role row; a row that already exists is left alone."""
        stmt = (
            insert(RoleAssignment)
            .values(user_id=user_id, role=role.value)
            .on_conflict_do_nothing(index_elements=["user_id", "role"])
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def get_users_by_role(self, role: UserRole) -> list[dict[str, Any]]:
        """Role rows for *role* joined to their profiles."""
        query = (
            select(
                RoleAssignment.user_id,
                RoleAssignment.role,
                Profile.id,
                Profile.email,
                Profile.full_name,
                Profile.created_at,
            )
            .join(Profile, Profile.id == RoleAssignment.user_id)
            .where(RoleAssignment.role == role.value)
            .order_by(Profile.created_at)
        )
        result = await self.session.execute(query)
        return [
            {
                "user_id": row.user_id,
                "role": row.role,
                "profile": {
                    "id": row.id,
                    "email": row.email,
                    "full_name": row.full_name,
                    "created_at": row.created_at,
                },
            }
            for row in result.all()
        ]

    async def find_unsynced_profiles(self) -> list[tuple[str, str]]:
        """``(user_id, role)`` for profiles whose role has no matching row."""
        missing = ~(
            select(RoleAssignment.user_id)
            .where(
                RoleAssignment.user_id == Profile.id,
                RoleAssignment.role == Profile.role,
            )
            .exists()
        )
        query = select(Profile.id, Profile.role).where(Profile.role.is_not(None), missing)
        result = await self.session.execute(query)
        return [(row.id, str(row.role)) for row in result.all()]

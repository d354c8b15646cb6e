"""Service layer for role assignment and role lookups."""

import logging

from redis.asyncio import Redis
from sqlalchemy.exc import SQLAlchemyError

from app.auth.session_cache import clear_cached_roles
from app.core.role_resolver import RoleResolver
from app.core.role_transitions import ensure_role_transition, validate_role_transition
from app.errors import DataAccessError
from app.models.user import UserRole
from app.repositories.protocols import ProfileRepositoryProtocol, RoleRepositoryProtocol
from app.schemas.role import (
    ConsistencyReport,
    RoleAssignmentResult,
    RoleCheckResponse,
    UnsyncedProfile,
    UsersByRoleResponse,
    UserWithRole,
)

logger = logging.getLogger(__name__)

# Write steps of a role change, in order, with the message prefix reported
# when that step fails.
_STEP_MESSAGES = {
    "delete_roles": "Error removing existing roles",
    "update_profile": "Error updating profile",
    "insert_role": "Error creating user role",
}


class RoleService:
    """Business logic for changing and inspecting user roles."""

    def __init__(
        self,
        roles: RoleRepositoryProtocol,
        profiles: ProfileRepositoryProtocol,
        redis: Redis | None = None,
    ):
        self._roles = roles
        self._profiles = profiles
        self._redis = redis

    async def _drop_cached_roles(self, user_id: str) -> None:
        await clear_cached_roles(self._redis, user_id)
        self._roles.invalidate_after_commit(user_id)

    @staticmethod
    def validate_role_transition(current_role: str | UserRole, new_role: str | UserRole) -> bool:
        return validate_role_transition(current_role, new_role)

    async def assign_role(
        self, user_id: str, new_role: UserRole, *, enforce_transition: bool = False
    ) -> RoleAssignmentResult | None:
        """Replace the user's roles with *new_role* and update the profile.

        The delete, profile update and insert run inside one savepoint. If
        any of them fails the savepoint is rolled back, so the profile and
        the role table are left exactly as they were, and the failure is
        reported in the result rather than raised.

        Returns ``None`` when *user_id* has no profile.

        Raises:
            ValidationError: If *enforce_transition* is set and the change is
                not on the allow-list.
        """
        try:
            profile = await self._profiles.get_by_id(user_id)
        except SQLAlchemyError as exc:
            error = DataAccessError.from_exception(exc)
            logger.exception("Role change for user %s failed loading profile", user_id)
            return RoleAssignmentResult(
                success=False,
                message=f"Error loading profile: {error.message}",
                user_id=user_id,
                role=new_role,
                failed_step="load_profile",
            )
        if profile is None:
            return None

        previous_role = str(profile.role) if profile.role else None
        transition_allowed = (
            validate_role_transition(previous_role, new_role) if previous_role else None
        )
        if enforce_transition and previous_role:
            ensure_role_transition(previous_role, new_role)

        step = "delete_roles"
        try:
            async with self._roles.savepoint():
                await self._roles.delete_roles(user_id)
                step = "update_profile"
                await self._profiles.update_role(user_id, new_role)
                step = "insert_role"
                await self._roles.insert_role(user_id, new_role)
        except SQLAlchemyError as exc:
            error = DataAccessError.from_exception(exc)
            logger.error(
                "Role change for user %s to %s failed at %s; all writes rolled back",
                user_id,
                new_role.value,
                step,
                exc_info=True,
            )
            return RoleAssignmentResult(
                success=False,
                message=f"{_STEP_MESSAGES[step]}: {error.message}",
                user_id=user_id,
                role=new_role,
                previous_role=previous_role,
                transition_allowed=transition_allowed,
                failed_step=step,
            )

        await self._drop_cached_roles(user_id)
        logger.info(
            "Role for user %s changed from %s to %s", user_id, previous_role, new_role.value
        )
        return RoleAssignmentResult(
            success=True,
            message="User role updated successfully",
            user_id=user_id,
            role=new_role,
            previous_role=previous_role,
            transition_allowed=transition_allowed,
        )

    async def get_resolver(self, user_id: str) -> RoleResolver:
        """Resolver over the user's stored roles; ``unavailable`` on failure."""
        try:
            roles = await self._roles.get_roles(user_id)
        except SQLAlchemyError:
            logger.exception("Failed to load roles for user %s", user_id)
            return RoleResolver.unavailable()
        return RoleResolver(roles)

    async def validate_user_role(self, user_id: str, role: UserRole) -> RoleCheckResponse:
        """Check whether *user_id* holds *role* according to the role table."""
        try:
            current = await self._roles.get_roles(user_id)
        except SQLAlchemyError as exc:
            error = DataAccessError.from_exception(exc)
            return RoleCheckResponse(
                is_valid=False,
                current_roles=[],
                error=f"Error fetching user roles: {error.message}",
            )

        resolver = RoleResolver(current)
        is_valid = resolver.has_role(role)
        return RoleCheckResponse(
            is_valid=is_valid,
            current_roles=[r.value for r in resolver.sorted_roles()],
            error=None if is_valid else f"User does not have required role: {role.value}",
        )

    async def get_users_by_role(self, role: UserRole) -> UsersByRoleResponse:
        """List users holding *role* with their profile details.

        Raises:
            DataAccessError: If the lookup fails.
        """
        try:
            rows = await self._roles.get_users_by_role(role)
        except SQLAlchemyError as exc:
            logger.exception("Failed to list users with role %s", role.value)
            raise DataAccessError.from_exception(exc) from exc

        items = [UserWithRole.model_validate(row) for row in rows]
        return UsersByRoleResponse(role=role, items=items, total=len(items))

    async def consistency_report(self) -> ConsistencyReport:
        """Profiles whose role is missing from the role table."""
        try:
            rows = await self._roles.find_unsynced_profiles()
        except SQLAlchemyError as exc:
            raise DataAccessError.from_exception(exc) from exc

        items = [UnsyncedProfile(user_id=uid, profile_role=role) for uid, role in rows]
        return ConsistencyReport(items=items, total=len(items))

    async def reconcile(self) -> int:
        """Insert the role rows missing for out-of-sync profiles.

        Returns the number of rows inserted.

        Raises:
            DataAccessError: If the back-fill fails; nothing is kept.
        """
        try:
            async with self._roles.savepoint():
                rows = await self._roles.find_unsynced_profiles()
                for user_id, role in rows:
                    await self._roles.insert_role(user_id, UserRole(role))
        except SQLAlchemyError as exc:
            logger.exception("Role reconciliation failed; no rows kept")
            raise DataAccessError.from_exception(exc) from exc

        for user_id, _ in rows:
            await self._drop_cached_roles(user_id)
        if rows:
            logger.warning("Reconciled %d profile(s) missing role rows", len(rows))
        return len(rows)

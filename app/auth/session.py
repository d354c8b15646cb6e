"""Per-request session context.

A :class:`SessionContext` is built once per request from the validated
token and the authoritative role store, and handed to route handlers via
dependency injection instead of living in a module-level global. The
token's own claims are never used to decide roles.
"""

import logging
from dataclasses import dataclass

from redis.asyncio import Redis
from sqlalchemy.exc import SQLAlchemyError

from app.auth.session_cache import get_cached_roles, role_cache_generation, set_cached_roles
from app.core.role_resolver import RoleResolver
from app.models.user import ProfileStatus
from app.repositories.protocols import ProfileRepositoryProtocol, RoleRepositoryProtocol
from app.schemas.auth import TokenUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileSnapshot:
    """The profile fields a session needs, detached from the ORM."""

    id: str
    email: str
    full_name: str | None
    role: str | None
    status: str

    @property
    def is_active(self) -> bool:
        return self.status == ProfileStatus.active


@dataclass(frozen=True)
class SessionContext:
    """Who is calling and what roles they hold."""

    user: TokenUser
    profile: ProfileSnapshot | None
    resolver: RoleResolver

    @property
    def is_authenticated(self) -> bool:
        """A session counts only with a profile and successfully loaded roles."""
        return self.profile is not None and not self.resolver.load_failed

    @property
    def guard_resolver(self) -> RoleResolver | None:
        """Resolver to hand to the route guard; ``None`` means no session."""
        return self.resolver if self.is_authenticated else None


def _snapshot_to_cache(profile: ProfileSnapshot | None, roles: list[str]) -> dict:
    return {
        "roles": roles,
        "profile": None
        if profile is None
        else {
            "id": profile.id,
            "email": profile.email,
            "full_name": profile.full_name,
            "role": profile.role,
            "status": profile.status,
        },
    }


def _build_context(user: TokenUser, profile: ProfileSnapshot | None, roles: list[str]) -> SessionContext:
    # Suspended accounts keep their rows but hold no roles for the session
    if profile is not None and not profile.is_active:
        roles = []
    return SessionContext(
        user=user,
        profile=profile,
        resolver=RoleResolver(roles, profile.role if profile else None),
    )


async def load_session_context(
    user: TokenUser,
    profiles: ProfileRepositoryProtocol,
    roles: RoleRepositoryProtocol,
    redis: Redis | None = None,
    cache_ttl: int = 0,
) -> SessionContext:
    """Load the caller's profile and roles, failing closed on errors."""
    cached = await get_cached_roles(redis, user.id)
    if cached is not None:
        raw_profile = cached.get("profile")
        profile = ProfileSnapshot(**raw_profile) if raw_profile else None
        return _build_context(user, profile, list(cached.get("roles") or []))

    # Taken before the database read so a role change in between voids the write
    generation = await role_cache_generation(redis, user.id) if cache_ttl > 0 else None
    try:
        record = await profiles.get_by_id(user.id)
        role_names = await roles.get_roles(user.id)
    except SQLAlchemyError:
        logger.exception("Failed to load roles for user %s", user.id)
        return SessionContext(user=user, profile=None, resolver=RoleResolver.unavailable())

    profile = (
        None
        if record is None
        else ProfileSnapshot(
            id=str(record.id),
            email=record.email,
            full_name=record.full_name,
            role=str(record.role) if record.role else None,
            status=str(record.status),
        )
    )
    await set_cached_roles(
        redis, user.id, _snapshot_to_cache(profile, role_names), cache_ttl, generation
    )
    return _build_context(user, profile, role_names)

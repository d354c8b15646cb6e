"""FastAPI dependency providers for repositories and services.

Separated from ``dependencies.py`` so that route modules and the auth
dependencies can import these aliases without circular imports.
"""

from typing import Annotated

from fastapi import Depends

from app.dependencies import DBSession, RedisClient
from app.repositories.profile_repository import ProfileRepository
from app.repositories.role_repository import RoleRepository
from app.services.profile_service import ProfileService
from app.services.role_service import RoleService

# ---------------------------------------------------------------------------
# Repository providers
# ---------------------------------------------------------------------------


def get_profile_repository(db: DBSession) -> ProfileRepository:
    return ProfileRepository(db)


def get_role_repository(db: DBSession) -> RoleRepository:
    return RoleRepository(db)


ProfileRepo = Annotated[ProfileRepository, Depends(get_profile_repository)]
RoleRepo = Annotated[RoleRepository, Depends(get_role_repository)]

# ---------------------------------------------------------------------------
# Service providers
# ---------------------------------------------------------------------------


def get_role_service(roles: RoleRepo, profiles: ProfileRepo, redis: RedisClient) -> RoleService:
    return RoleService(roles, profiles, redis)


def get_profile_service(
    profiles: ProfileRepo, roles: RoleRepo, redis: RedisClient
) -> ProfileService:
    return ProfileService(profiles, roles, redis)


RoleSvc = Annotated[RoleService, Depends(get_role_service)]
ProfileSvc = Annotated[ProfileService, Depends(get_profile_service)]

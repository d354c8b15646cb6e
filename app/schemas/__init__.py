"""Pydantic schemas package."""
from app.schemas.auth import LogoutResponse, MeResponse, TokenUser
from app.schemas.navigation import GuardDecisionResponse
from app.schemas.profile import (
    ProfileCreate,
    ProfileListResponse,
    ProfileResponse,
    StatusUpdateRequest,
)
from app.schemas.role import (
    ConsistencyReport,
    ReconcileResponse,
    RoleAssignmentResult,
    RoleAssignRequest,
    RoleCheckResponse,
    TransitionCheckResponse,
    UsersByRoleResponse,
    UserWithRole,
)

__all__ = [
    # Auth schemas
    "TokenUser",
    "MeResponse",
    "LogoutResponse",
    # Navigation schemas
    "GuardDecisionResponse",
    # Profile schemas
    "ProfileCreate",
    "ProfileResponse",
    "ProfileListResponse",
    "StatusUpdateRequest",
    # Role schemas
    "RoleAssignRequest",
    "RoleAssignmentResult",
    "RoleCheckResponse",
    "TransitionCheckResponse",
    "UserWithRole",
    "UsersByRoleResponse",
    "ConsistencyReport",
    "ReconcileResponse",
]

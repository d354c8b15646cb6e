"""Admin API endpoints: user listing, role management and moderation."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi_filter import FilterDepends

from app.auth.dependencies import Session, require_role
from app.core.role_transitions import validate_role_transition
from app.errors import ValidationError
from app.filters.profile import ProfileFilter
from app.models.user import ProfileStatus, UserRole
from app.providers import ProfileSvc, RoleSvc
from app.rate_limit import limiter
from app.schemas.profile import ProfileListResponse, ProfileResponse, StatusUpdateRequest
from app.schemas.role import (
    ConsistencyReport,
    ReconcileResponse,
    RoleAssignmentResult,
    RoleAssignRequest,
    RoleCheckResponse,
    TransitionCheckResponse,
    UsersByRoleResponse,
)
from app.utils.audit import audit_logged

router = APIRouter()

_ADMIN_ONLY = Depends(require_role(UserRole.admin))


@router.get("/users", response_model=ProfileListResponse, dependencies=[_ADMIN_ONLY])
async def list_users(
    service: ProfileSvc,
    filters: ProfileFilter = FilterDepends(ProfileFilter),
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=100),
) -> ProfileListResponse:
    """
    List user profiles with optional filtering.

    - **role**: Filter by the profile's role
    - **status**: ``active`` or ``suspended``
    - **email__ilike**: Case-insensitive email match (use ``%`` wildcards)
    - **order_by**: Sort fields (e.g. ``email``, ``-created_at``)
    """
    return await service.list_profiles(filters, page=page, size=size)


@router.get(
    "/users/by-role/{role}",
    response_model=UsersByRoleResponse,
    dependencies=[_ADMIN_ONLY],
)
async def list_users_by_role(role: UserRole, service: RoleSvc) -> UsersByRoleResponse:
    """List users holding *role* in the role table."""
    return await service.get_users_by_role(role)


@router.put(
    "/users/{user_id}/role",
    response_model=RoleAssignmentResult,
    dependencies=[_ADMIN_ONLY, Depends(audit_logged("assign_role"))],
)
@limiter.limit("30/minute")
async def assign_role(
    request: Request,
    response: Response,
    user_id: str,
    body: RoleAssignRequest,
    service: RoleSvc,
    strict: bool = Query(False, description="Reject changes not on the transition allow-list"),
) -> RoleAssignmentResult:
    """
    Replace a user's role.

    The role rows and the profile are updated together; if any write fails
    none of them are kept and the response reports the failed step with a
    503 status.
    """
    result = await service.assign_role(user_id, body.role, enforce_transition=strict)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{user_id}' not found",
        )
    if not result.success:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result


@router.get(
    "/users/{user_id}/role-check",
    response_model=RoleCheckResponse,
    dependencies=[_ADMIN_ONLY],
)
async def check_user_role(
    user_id: str,
    service: RoleSvc,
    role: UserRole = Query(..., description="Role to check for"),
) -> RoleCheckResponse:
    """Whether *user_id* holds *role* according to the role table."""
    return await service.validate_user_role(user_id, role)


@router.get(
    "/roles/transitions",
    response_model=TransitionCheckResponse,
    dependencies=[_ADMIN_ONLY],
)
async def check_transition(
    current: UserRole = Query(..., description="Current role"),
    new: UserRole = Query(..., description="Requested role"),
) -> TransitionCheckResponse:
    """Whether changing from *current* to *new* is on the allow-list."""
    return TransitionCheckResponse(
        current_role=current,
        new_role=new,
        allowed=validate_role_transition(current, new),
    )


@router.put(
    "/users/{user_id}/status",
    response_model=ProfileResponse,
    dependencies=[_ADMIN_ONLY, Depends(audit_logged("set_user_status"))],
)
async def set_user_status(
    user_id: str,
    body: StatusUpdateRequest,
    ctx: Session,
    service: ProfileSvc,
) -> ProfileResponse:
    """Suspend or reactivate a user. Suspended users hold no roles."""
    if user_id == ctx.user.id and body.status == ProfileStatus.suspended:
        raise ValidationError("You cannot suspend your own account", field="status")

    profile = await service.set_status(user_id, body.status)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{user_id}' not found",
        )
    return profile


@router.get(
    "/roles/consistency",
    response_model=ConsistencyReport,
    dependencies=[_ADMIN_ONLY],
)
async def role_consistency(service: RoleSvc) -> ConsistencyReport:
    """Profiles whose role has no matching role-table row."""
    return await service.consistency_report()


@router.post(
    "/roles/reconcile",
    response_model=ReconcileResponse,
    dependencies=[_ADMIN_ONLY, Depends(audit_logged("reconcile_roles"))],
)
async def reconcile_roles(service: RoleSvc) -> ReconcileResponse:
    """Back-fill role rows from profile roles."""
    inserted = await service.reconcile()
    return ReconcileResponse(inserted=inserted)

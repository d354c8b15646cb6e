"""Pydantic schemas for role management."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.user import UserRole


class RoleAssignRequest(BaseModel):
    """Schema for changing a user's role."""

    role: UserRole


class RoleAssignmentResult(BaseModel):
    """Outcome of a role change.

    ``success`` is false when any of the writes failed; in that case none of
    them were kept and ``failed_step`` names the write that failed.
    """

    success: bool
    message: str
    user_id: str
    role: UserRole
    previous_role: str | None = None
    transition_allowed: bool | None = None
    failed_step: str | None = None


class RoleCheckResponse(BaseModel):
    """Whether a user holds a role."""

    is_valid: bool
    current_roles: list[str]
    error: str | None = None


class TransitionCheckResponse(BaseModel):
    """Whether a role change is on the allow-list."""

    current_role: UserRole
    new_role: UserRole
    allowed: bool


class RoleProfileInfo(BaseModel):
    """Profile fields embedded in a by-role listing."""

    id: str
    email: str
    full_name: str | None = None
    created_at: datetime


class UserWithRole(BaseModel):
    """One role row joined to its profile."""

    user_id: str
    role: UserRole
    profile: RoleProfileInfo


class UsersByRoleResponse(BaseModel):
    """Schema for the by-role user listing."""

    role: UserRole
    items: list[UserWithRole]
    total: int


class UnsyncedProfile(BaseModel):
    """A profile whose role has no matching ``user_roles`` row."""

    user_id: str
    profile_role: UserRole


class ConsistencyReport(BaseModel):
    """Profiles out of sync with the role table."""

    items: list[UnsyncedProfile]
    total: int = Field(ge=0)


class ReconcileResponse(BaseModel):
    """Result of back-filling missing role rows."""

    inserted: int

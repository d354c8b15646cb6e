"""Profile API endpoints."""

from fastapi import APIRouter, HTTPException, status

from app.auth.dependencies import CurrentUser
from app.providers import ProfileSvc
from app.repositories.profile_repository import DuplicateProfileError
from app.schemas.profile import ProfileCreate, ProfileResponse

router = APIRouter()


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    body: ProfileCreate,
    current_user: CurrentUser,
    service: ProfileSvc,
) -> ProfileResponse:
    """Create the caller's profile after sign-up.

    Only ``landlord`` or ``renter`` may be chosen; admins are appointed by
    another admin.
    """
    try:
        return await service.create_profile(current_user, body)
    except DuplicateProfileError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Profile already exists",
        )

"""Pydantic schemas for profiles."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user import ProfileStatus


class ProfileCreate(BaseModel):
    """Schema for creating the caller's profile at signup."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    # Admin is never self-assigned
    role: Literal["landlord", "renter"] = "renter"

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v


class ProfileResponse(BaseModel):
    """Schema for profile response."""

    id: str
    email: str
    full_name: str | None = None
    role: str | None = None
    status: str
    avatar_url: str | None = None
    last_sign_in_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileListResponse(BaseModel):
    """Schema for paginated profile list."""

    items: list[ProfileResponse]
    total: int
    page: int
    size: int
    pages: int


class StatusUpdateRequest(BaseModel):
    """Schema for suspending or reactivating a user."""

    status: ProfileStatus

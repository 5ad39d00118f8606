"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Schema for editing one's own profile (all fields optional)."""

    display_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=1000)


class ProfileResponse(BaseModel):
    """Schema for the caller's own profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    display_name: str | None
    bio: str | None
    created_at: datetime
    updated_at: datetime


class BadgeResponse(BaseModel):
    """Schema for an earned badge."""

    model_config = ConfigDict(from_attributes=True)

    badge_type: str
    badge_name: str
    earned_at: datetime


class PublicProfileResponse(BaseModel):
    """Schema for a member's community page."""

    id: UUID
    display_name: str | None
    bio: str | None
    badges: list[BadgeResponse] = []
    skill_count: int = 0
    hours_contributed: int = 0


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile response."""

    data: ProfileResponse


class PublicProfileDetailResponse(BaseModel):
    """Schema for single public profile response."""

    data: PublicProfileResponse

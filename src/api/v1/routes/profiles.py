"""Profile API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import (
    BadgeResponse,
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileDetailResponse,
    PublicProfileResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get my profile",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the authenticated user's profile, creating it on first visit."""
    profile = await service.get_or_create(user.id, user.email, user.display_name)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.patch(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Update my profile",
    responses={404: {"description": "Profile not created yet"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_my_profile(
    request: Request,
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Change display name and/or bio."""
    profile = await service.update(user.id, display_name=body.display_name, bio=body.bio)
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))


@router.get(
    "/{user_id}",
    response_model=PublicProfileDetailResponse,
    summary="Get a member's public profile",
    responses={404: {"description": "Profile not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_public_profile(
    request: Request,
    user_id: UUID,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> PublicProfileDetailResponse:
    """Display name, bio, badges, number of skills and confirmed hours given."""
    public = await service.get_public(user_id)
    return PublicProfileDetailResponse(
        data=PublicProfileResponse(
            id=public.profile.id,
            display_name=public.profile.display_name,
            bio=public.profile.bio,
            badges=[BadgeResponse.model_validate(b) for b in public.badges],
            skill_count=public.skill_count,
            hours_contributed=public.hours_contributed,
        )
    )

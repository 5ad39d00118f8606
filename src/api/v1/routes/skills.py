"""Skill API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser, OptionalUser
from api.v1.dependencies import get_skill_service
from api.v1.schemas.skill import (
    SkillCreate,
    SkillDetailResponse,
    SkillListingResponse,
    SkillListResponse,
    SkillResponse,
    SkillSearchResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.skill import Skill, SkillListing
from domain.services.skill_service import SkillService

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get(
    "",
    response_model=SkillSearchResponse,
    summary="Search skills",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def search_skills(
    request: Request,
    user: OptionalUser,
    service: SkillService = Depends(get_skill_service),
    q: str | None = Query(None, max_length=100, description="Matches name or description"),
    category: str | None = Query(None, description="Exact category"),
    exclude_own: bool = Query(True, description="Hide the caller's own skills"),
) -> SkillSearchResponse:
    """
    Browse the skills members offer, with the name of whoever offers each.

    Anyone may search. When authenticated, the caller's own skills are
    hidden unless `exclude_own=false`.
    """
    exclude_user_id = user.id if user and exclude_own else None
    listings = await service.search(term=q, category=category, exclude_user_id=exclude_user_id)
    return SkillSearchResponse(
        data=[_build_listing_response(item) for item in listings],
        meta={"total": len(listings)},
    )


@router.get(
    "/mine",
    response_model=SkillListResponse,
    summary="List my skills",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_my_skills(
    request: Request,
    user: CurrentUser,
    service: SkillService = Depends(get_skill_service),
) -> SkillListResponse:
    """Get the skills the authenticated user offers."""
    skills = await service.get_all_for_user(user.id)
    return SkillListResponse(
        data=[_build_skill_response(s) for s in skills],
        meta={"total": len(skills)},
    )


@router.post(
    "",
    response_model=SkillDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Offer a skill",
    responses={400: {"description": "Unknown category"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_skill(
    request: Request,
    body: SkillCreate,
    user: CurrentUser,
    service: SkillService = Depends(get_skill_service),
) -> SkillDetailResponse:
    """Add a skill to the authenticated user's offers."""
    skill = await service.create(
        user_id=user.id,
        name=body.name,
        category=body.category,
        description=body.description,
    )
    return SkillDetailResponse(data=_build_skill_response(skill))


@router.delete(
    "/{skill_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a skill",
    responses={
        403: {"description": "Not your skill"},
        404: {"description": "Skill not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_skill(
    request: Request,
    skill_id: UUID,
    user: CurrentUser,
    service: SkillService = Depends(get_skill_service),
) -> None:
    """Withdraw one of the authenticated user's skills."""
    await service.delete(skill_id, user.id)
    return None


def _build_skill_response(skill: Skill) -> SkillResponse:
    return SkillResponse(
        id=skill.id,
        user_id=skill.user_id,
        name=skill.name,
        category=skill.category,
        description=skill.description,
        created_at=skill.created_at,
    )


def _build_listing_response(listing: SkillListing) -> SkillListingResponse:
    return SkillListingResponse(
        **_build_skill_response(listing.skill).model_dump(),
        owner_name=listing.owner_name,
    )

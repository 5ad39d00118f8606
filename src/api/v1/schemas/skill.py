"""Pydantic schemas for Skill API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.skill import SkillCategory


class SkillCreate(BaseModel):
    """Schema for offering a skill."""

    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(SkillCategory.OTHER.value, max_length=20)
    description: str | None = Field(None, max_length=2000)


class SkillResponse(BaseModel):
    """Schema for Skill response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    category: SkillCategory
    description: str | None
    created_at: datetime


class SkillListingResponse(SkillResponse):
    """A search result: the skill plus who offers it."""

    owner_name: str


class SkillDetailResponse(BaseModel):
    """Schema for single Skill response."""

    data: SkillResponse


class SkillListResponse(BaseModel):
    """Schema for list of Skills response."""

    data: list[SkillResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class SkillSearchResponse(BaseModel):
    """Schema for skill search results."""

    data: list[SkillListingResponse]
    meta: dict[str, Any] = Field(default_factory=dict)

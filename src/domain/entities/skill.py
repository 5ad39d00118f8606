"""Skill domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class SkillCategory(StrEnum):
    """Categories a skill or task can be filed under."""

    TEACHING = "teaching"
    REPAIRS = "repairs"
    CLEANING = "cleaning"
    CAREGIVING = "caregiving"
    OTHER = "other"


@dataclass
class Skill:
    """A capability a member offers to the community."""

    user_id: UUID
    name: str
    category: SkillCategory = SkillCategory.OTHER
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class SkillListing:
    """A skill in search results, with the display name of whoever offers it."""

    skill: Skill
    owner_name: str

"""Skill repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.skill import Skill


class ISkillRepository(Protocol):
    """Repository interface for Skill entities."""

    async def get(self, id: UUID) -> Skill | None:
        """Get a skill by ID."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[Skill]:
        """Get every skill a user offers."""
        ...

    async def search(
        self,
        term: str | None = None,
        category: str | None = None,
        exclude_user_id: UUID | None = None,
        limit: int = 50,
    ) -> list[Skill]:
        """Substring match on name/description, optional category and owner filters."""
        ...

    async def count_for_user(self, user_id: UUID) -> int:
        """Count the skills a user offers."""
        ...

    async def create(self, skill: Skill) -> Skill:
        """Create a new skill."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a skill and return success status."""
        ...

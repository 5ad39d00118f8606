"""Badge repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.badge import Badge


class IBadgeRepository(Protocol):
    """Read-only repository interface for Badge entities."""

    async def get_all_for_user(self, user_id: UUID) -> list[Badge]:
        """Get a user's badges, most recently earned first."""
        ...

"""Credit ledger repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.credit import CreditEntry


class ICreditRepository(Protocol):
    """Repository interface for the append-only credit ledger (no update or delete)."""

    async def append(self, entry: CreditEntry) -> CreditEntry:
        """Write a new ledger entry."""
        ...

    async def list_for_user(self, user_id: UUID) -> list[CreditEntry]:
        """Get a user's entries, newest first."""
        ...

    async def sum_for_user(self, user_id: UUID) -> int:
        """Aggregate a user's balance from their entries."""
        ...

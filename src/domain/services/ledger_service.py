"""Credit ledger service."""

from collections.abc import Callable
from uuid import UUID

from domain.entities.credit import CreditEntry, compute_balance
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.principal import require_principal


class LedgerService:
    """Read side of the credit ledger.

    Entries are only ever written by TaskService transitions; this service
    aggregates them. Balances are recomputed on every call.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_balance(self, user_id: UUID | None) -> int:
        """Sum of the user's ledger entries."""
        user_id = require_principal(user_id)
        async with self._uow_factory() as uow:
            return await uow.credits.sum_for_user(user_id)  # type: ignore[no-any-return]

    async def get_statement(self, user_id: UUID | None) -> tuple[list[CreditEntry], int]:
        """The user's entries (newest first) and the balance they add up to."""
        user_id = require_principal(user_id)
        async with self._uow_factory() as uow:
            entries = await uow.credits.list_for_user(user_id)
        return entries, compute_balance(entries)

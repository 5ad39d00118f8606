"""SQLAlchemy implementation of the credit ledger repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.credit import CreditEntry, TransactionType
from infrastructure.database.models import CreditModel


class SQLAlchemyCreditRepository:
    """SQLAlchemy implementation of ICreditRepository (insert and read only)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, entry: CreditEntry) -> CreditEntry:
        """Write a new ledger entry."""
        model = CreditModel(
            id=entry.id,
            user_id=entry.user_id,
            amount=entry.amount,
            transaction_type=entry.transaction_type.value,
            related_task_id=entry.related_task_id,
            description=entry.description,
            created_at=entry.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return entry

    async def list_for_user(self, user_id: UUID) -> list[CreditEntry]:
        """Get a user's entries, newest first."""
        stmt = (
            select(CreditModel)
            .where(CreditModel.user_id == user_id)
            .order_by(CreditModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def sum_for_user(self, user_id: UUID) -> int:
        """Aggregate a user's balance from their entries."""
        stmt = select(func.coalesce(func.sum(CreditModel.amount), 0)).where(
            CreditModel.user_id == user_id
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    def _to_entity(self, model: CreditModel) -> CreditEntry:
        """Convert ORM model to domain entity."""
        return CreditEntry(
            id=model.id,
            user_id=model.user_id,
            amount=model.amount,
            transaction_type=TransactionType(model.transaction_type),
            related_task_id=model.related_task_id,
            description=model.description,
            created_at=model.created_at,
        )

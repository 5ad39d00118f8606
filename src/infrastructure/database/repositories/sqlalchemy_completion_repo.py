"""SQLAlchemy implementation of TaskCompletion repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.task import ConfirmationStatus, TaskCompletion
from infrastructure.database.models import TaskCompletionModel


class SQLAlchemyCompletionRepository:
    """SQLAlchemy implementation of ICompletionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_task(self, task_id: UUID) -> TaskCompletion | None:
        """Get the completion record of a task, if any."""
        stmt = select(TaskCompletionModel).where(TaskCompletionModel.task_id == task_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, completion: TaskCompletion) -> TaskCompletion:
        """Create a completion record."""
        model = TaskCompletionModel(
            id=completion.id,
            task_id=completion.task_id,
            provider_id=completion.provider_id,
            requester_id=completion.requester_id,
            credits_transferred=completion.credits_transferred,
            confirmation_status=completion.confirmation_status.value,
            created_at=completion.created_at,
            confirmed_at=completion.confirmed_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def approve(self, task_id: UUID, at: datetime) -> bool:
        """Move the task's completion from pending to approved."""
        stmt = (
            update(TaskCompletionModel)
            .where(
                TaskCompletionModel.task_id == task_id,
                TaskCompletionModel.confirmation_status == ConfirmationStatus.PENDING.value,
            )
            .values(
                confirmation_status=ConfirmationStatus.APPROVED.value,
                confirmed_at=at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount == 1  # type: ignore[attr-defined, no-any-return]

    async def sum_approved_for_provider(self, provider_id: UUID) -> int:
        """Total credits of approved completions a user delivered."""
        stmt = select(
            func.coalesce(func.sum(TaskCompletionModel.credits_transferred), 0)
        ).where(
            TaskCompletionModel.provider_id == provider_id,
            TaskCompletionModel.confirmation_status == ConfirmationStatus.APPROVED.value,
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    def _to_entity(self, model: TaskCompletionModel) -> TaskCompletion:
        """Convert ORM model to domain entity."""
        return TaskCompletion(
            id=model.id,
            task_id=model.task_id,
            provider_id=model.provider_id,
            requester_id=model.requester_id,
            credits_transferred=model.credits_transferred,
            confirmation_status=ConfirmationStatus(model.confirmation_status),
            created_at=model.created_at,
            confirmed_at=model.confirmed_at,
        )

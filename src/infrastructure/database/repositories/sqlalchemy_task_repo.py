"""SQLAlchemy implementation of Task repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.task import Task, TaskStatus
from infrastructure.database.models import TaskModel


class SQLAlchemyTaskRepository:
    """SQLAlchemy implementation of ITaskRepository.

    Status changes are issued as ``UPDATE ... WHERE <expected state>`` so a
    concurrent writer that got there first makes the update match no rows.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        stmt = select(TaskModel).where(TaskModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_requester(self, requester_id: UUID) -> list[Task]:
        """Get tasks a user asked for, newest first."""
        stmt = (
            select(TaskModel)
            .where(TaskModel.requester_id == requester_id)
            .order_by(TaskModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_open_for_skills(self, skill_ids: list[UUID]) -> list[Task]:
        """Get unclaimed open tasks linked to any of the given skills."""
        if not skill_ids:
            return []

        stmt = (
            select(TaskModel)
            .where(
                TaskModel.skill_id.in_(skill_ids),
                TaskModel.status == TaskStatus.OPEN.value,
                TaskModel.provider_id.is_(None),
            )
            .order_by(TaskModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, task: Task) -> Task:
        """Create a new task."""
        model = self._to_model(task)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def claim(self, id: UUID, provider_id: UUID, at: datetime) -> bool:
        """Conditionally assign the provider and move ``open -> accepted``."""
        stmt = (
            update(TaskModel)
            .where(
                TaskModel.id == id,
                TaskModel.status == TaskStatus.OPEN.value,
                TaskModel.provider_id.is_(None),
            )
            .values(
                provider_id=provider_id,
                status=TaskStatus.ACCEPTED.value,
                updated_at=at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount == 1  # type: ignore[attr-defined, no-any-return]

    async def transition(
        self,
        id: UUID,
        expected_status: TaskStatus,
        new_status: TaskStatus,
        at: datetime,
        expected_provider_id: UUID | None = None,
    ) -> bool:
        """Compare-and-set the status (and provider, if given)."""
        conditions = [TaskModel.id == id, TaskModel.status == expected_status.value]
        if expected_provider_id is not None:
            conditions.append(TaskModel.provider_id == expected_provider_id)

        values: dict[str, object] = {"status": new_status.value, "updated_at": at}
        if new_status == TaskStatus.COMPLETED:
            values["completed_at"] = at

        stmt = (
            update(TaskModel)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount == 1  # type: ignore[attr-defined, no-any-return]

    def _to_entity(self, model: TaskModel) -> Task:
        """Convert ORM model to domain entity."""
        return Task(
            id=model.id,
            requester_id=model.requester_id,
            provider_id=model.provider_id,
            skill_id=model.skill_id,
            title=model.title,
            description=model.description,
            category=model.category,
            credits_value=model.credits_value,
            status=TaskStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
            completed_at=model.completed_at,
        )

    def _to_model(self, entity: Task) -> TaskModel:
        """Convert domain entity to ORM model."""
        return TaskModel(
            id=entity.id,
            requester_id=entity.requester_id,
            provider_id=entity.provider_id,
            skill_id=entity.skill_id,
            title=entity.title,
            description=entity.description,
            category=entity.category,
            credits_value=entity.credits_value,
            status=entity.status.value,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            completed_at=entity.completed_at,
        )

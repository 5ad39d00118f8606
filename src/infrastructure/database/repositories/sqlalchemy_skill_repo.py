"""SQLAlchemy implementation of Skill repository."""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.skill import Skill, SkillCategory
from infrastructure.database.models import SkillModel


class SQLAlchemySkillRepository:
    """SQLAlchemy implementation of ISkillRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Skill | None:
        """Get a skill by ID."""
        stmt = select(SkillModel).where(SkillModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_user(self, user_id: UUID) -> list[Skill]:
        """Get every skill a user offers, newest first."""
        stmt = (
            select(SkillModel)
            .where(SkillModel.user_id == user_id)
            .order_by(SkillModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def search(
        self,
        term: str | None = None,
        category: str | None = None,
        exclude_user_id: UUID | None = None,
        limit: int = 50,
    ) -> list[Skill]:
        """Case-insensitive substring match on name or description."""
        stmt = select(SkillModel)
        if term:
            pattern = f"%{term}%"
            stmt = stmt.where(
                or_(
                    SkillModel.skill_name.ilike(pattern),
                    SkillModel.description.ilike(pattern),
                )
            )
        if category:
            stmt = stmt.where(SkillModel.category == category)
        if exclude_user_id:
            stmt = stmt.where(SkillModel.user_id != exclude_user_id)

        stmt = stmt.order_by(SkillModel.created_at.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_for_user(self, user_id: UUID) -> int:
        """Count the skills a user offers."""
        stmt = select(func.count()).select_from(SkillModel).where(SkillModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(self, skill: Skill) -> Skill:
        """Create a new skill."""
        model = SkillModel(
            id=skill.id,
            user_id=skill.user_id,
            skill_name=skill.name,
            category=skill.category.value,
            description=skill.description,
            created_at=skill.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a skill."""
        stmt = select(SkillModel).where(SkillModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: SkillModel) -> Skill:
        """Convert ORM model to domain entity."""
        return Skill(
            id=model.id,
            user_id=model.user_id,
            name=model.skill_name,
            category=SkillCategory(model.category),
            description=model.description,
            created_at=model.created_at,
        )

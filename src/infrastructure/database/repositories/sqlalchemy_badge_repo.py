"""SQLAlchemy implementation of Badge repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.badge import Badge
from infrastructure.database.models import BadgeModel


class SQLAlchemyBadgeRepository:
    """SQLAlchemy implementation of IBadgeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_all_for_user(self, user_id: UUID) -> list[Badge]:
        """Get a user's badges, most recently earned first."""
        stmt = (
            select(BadgeModel)
            .where(BadgeModel.user_id == user_id)
            .order_by(BadgeModel.earned_at.desc())
        )
        result = await self._session.execute(stmt)
        return [
            Badge(
                id=model.id,
                user_id=model.user_id,
                badge_type=model.badge_type,
                badge_name=model.badge_name,
                earned_at=model.earned_at,
            )
            for model in result.scalars()
        ]

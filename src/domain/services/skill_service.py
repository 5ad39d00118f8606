"""Skill service layer with business logic."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import AuthorizationError, SkillNotFoundError, ValidationError
from domain.entities.profile import FALLBACK_MEMBER_NAME
from domain.entities.skill import Skill, SkillCategory, SkillListing
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.principal import require_principal

logger = structlog.get_logger()


def parse_category(value: str | None) -> SkillCategory | None:
    """Normalise a user-supplied category, rejecting unknown values."""
    if value is None or not value.strip():
        return None
    try:
        return SkillCategory(value.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown category: {value}",
            details={"field": "category", "allowed": [c.value for c in SkillCategory]},
        ) from None


class SkillService:
    """Service layer for the skill catalogue."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        search_limit: int = settings.skill_search_limit,
    ) -> None:
        self._uow_factory = uow_factory
        self._search_limit = search_limit

    async def create(
        self,
        user_id: UUID | None,
        name: str,
        category: str | None = None,
        description: str | None = None,
    ) -> Skill:
        """Offer a new skill."""
        user_id = require_principal(user_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Skill name is required", details={"field": "name"})

        skill = Skill(
            user_id=user_id,
            name=name,
            category=parse_category(category) or SkillCategory.OTHER,
            description=description,
        )
        async with self._uow_factory() as uow:
            created = await uow.skills.create(skill)
            await uow.commit()

        logger.info("skill_created", skill_id=str(created.id), user_id=str(user_id))
        return created

    async def get_all_for_user(self, user_id: UUID | None) -> list[Skill]:
        """Get every skill the caller offers."""
        user_id = require_principal(user_id)
        async with self._uow_factory() as uow:
            return await uow.skills.get_all_for_user(user_id)  # type: ignore[no-any-return]

    async def search(
        self,
        term: str | None = None,
        category: str | None = None,
        exclude_user_id: UUID | None = None,
    ) -> list[SkillListing]:
        """Find skills whose name or description contains ``term``.

        Each result carries the owner's display name, or a generic label
        when the owner has not set one.
        """
        parsed = parse_category(category)
        async with self._uow_factory() as uow:
            skills = await uow.skills.search(
                term=term.strip() if term and term.strip() else None,
                category=parsed.value if parsed else None,
                exclude_user_id=exclude_user_id,
                limit=self._search_limit,
            )
            if not skills:
                return []

            owner_ids = list({s.user_id for s in skills})
            profiles = await uow.profiles.get_many(owner_ids)
            names = {p.id: p.display_name for p in profiles}

        return [
            SkillListing(skill=s, owner_name=names.get(s.user_id) or FALLBACK_MEMBER_NAME)
            for s in skills
        ]

    async def delete(self, skill_id: UUID, user_id: UUID | None) -> bool:
        """Remove one of the caller's skills."""
        user_id = require_principal(user_id)
        async with self._uow_factory() as uow:
            skill = await uow.skills.get(skill_id)
            if not skill:
                raise SkillNotFoundError(str(skill_id))
            if skill.user_id != user_id:
                raise AuthorizationError("You can only delete your own skills")

            deleted = await uow.skills.delete(skill_id)
            await uow.commit()
            return deleted  # type: ignore[no-any-return]

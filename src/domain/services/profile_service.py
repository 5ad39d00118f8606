"""Profile service layer."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from core.exceptions import ProfileNotFoundError
from domain.entities.profile import Profile, PublicProfile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.principal import require_principal


class ProfileService:
    """Service layer for member profiles and their public pages."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_or_create(
        self,
        user_id: UUID | None,
        email: str,
        display_name: str | None = None,
    ) -> Profile:
        """Get the caller's profile, creating it from token claims on first access."""
        user_id = require_principal(user_id)
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if profile:
                return profile

            created = await uow.profiles.create(
                Profile(id=user_id, email=email, display_name=display_name)
            )
            await uow.commit()
            return created

    async def update(
        self,
        user_id: UUID | None,
        display_name: str | None = None,
        bio: str | None = None,
    ) -> Profile:
        """Update the caller's own profile. Omitted fields are left unchanged."""
        user_id = require_principal(user_id)
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))

            if display_name is not None:
                profile.display_name = display_name
            if bio is not None:
                profile.bio = bio
            profile.updated_at = datetime.utcnow()

            updated = await uow.profiles.update(profile)
            await uow.commit()
            return updated

    async def get_public(self, user_id: UUID) -> PublicProfile:
        """A member's community page: profile, badges, skills and hours given."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))

            badges = await uow.badges.get_all_for_user(user_id)
            skill_count = await uow.skills.count_for_user(user_id)
            hours = await uow.completions.sum_approved_for_provider(user_id)

            return PublicProfile(
                profile=profile,
                badges=badges,
                skill_count=skill_count,
                hours_contributed=hours,
            )

"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.badge_repository import IBadgeRepository
from domain.repositories.completion_repository import ICompletionRepository
from domain.repositories.credit_repository import ICreditRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.skill_repository import ISkillRepository
from domain.repositories.task_repository import ITaskRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    skills: ISkillRepository
    tasks: ITaskRepository
    completions: ICompletionRepository
    credits: ICreditRepository
    badges: IBadgeRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...

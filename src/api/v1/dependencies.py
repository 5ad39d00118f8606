"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.ledger_service import LedgerService
from domain.services.profile_service import ProfileService
from domain.services.skill_service import SkillService
from domain.services.task_service import TaskService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_task_service() -> TaskService:
    """Get Task service instance."""
    return TaskService(get_uow_factory())


@lru_cache
def get_ledger_service() -> LedgerService:
    """Get Ledger service instance."""
    return LedgerService(get_uow_factory())


@lru_cache
def get_skill_service() -> SkillService:
    """Get Skill service instance."""
    return SkillService(get_uow_factory())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())

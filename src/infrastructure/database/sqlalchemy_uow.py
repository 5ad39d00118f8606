"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import PersistenceError
from infrastructure.database.repositories.sqlalchemy_badge_repo import SQLAlchemyBadgeRepository
from infrastructure.database.repositories.sqlalchemy_completion_repo import (
    SQLAlchemyCompletionRepository,
)
from infrastructure.database.repositories.sqlalchemy_credit_repo import SQLAlchemyCreditRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository
from infrastructure.database.repositories.sqlalchemy_skill_repo import SQLAlchemySkillRepository
from infrastructure.database.repositories.sqlalchemy_task_repo import SQLAlchemyTaskRepository

logger = structlog.get_logger()


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    One instance is one transaction. Leaving the context without a commit,
    or with an exception, rolls back everything written through it.
    Database errors surface as PersistenceError.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        """Get profile repository."""
        return SQLAlchemyProfileRepository(self._require_session())

    @property
    def skills(self) -> SQLAlchemySkillRepository:
        """Get skill repository."""
        return SQLAlchemySkillRepository(self._require_session())

    @property
    def tasks(self) -> SQLAlchemyTaskRepository:
        """Get task repository."""
        return SQLAlchemyTaskRepository(self._require_session())

    @property
    def completions(self) -> SQLAlchemyCompletionRepository:
        """Get task completion repository."""
        return SQLAlchemyCompletionRepository(self._require_session())

    @property
    def credits(self) -> SQLAlchemyCreditRepository:
        """Get credit ledger repository."""
        return SQLAlchemyCreditRepository(self._require_session())

    @property
    def badges(self) -> SQLAlchemyBadgeRepository:
        """Get badge repository."""
        return SQLAlchemyBadgeRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager, rolling back on error, and cleanup."""
        if not self._session:
            return
        try:
            # No-op after a successful commit; discards everything otherwise.
            await self.rollback()
        finally:
            await self._session.close()
            self._session = None

        if isinstance(exc_val, SQLAlchemyError):
            logger.error(
                "database_error",
                error=str(exc_val),
                error_type=type(exc_val).__name__,
            )
            raise PersistenceError() from exc_val

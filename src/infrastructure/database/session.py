"""Database engine and session management."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import settings


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for ``url``.

    Supabase's Supavisor pooler runs in transaction mode, where asyncpg's
    prepared statement cache breaks; it is turned off for pooler URLs.
    """
    connect_args: dict[str, Any] = {}
    if "pooler.supabase.com" in url:
        connect_args["statement_cache_size"] = 0

    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        connect_args=connect_args,
    )


engine = build_engine(settings.async_database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for a bare session (health checks only; services use a UoW)."""
    async with async_session_factory() as session:
        yield session

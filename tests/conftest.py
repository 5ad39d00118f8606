"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from uuid import uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, ProfileModel

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SECRET_KEY = "test-secret-key"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test, with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for direct inspection in a test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_user() -> TokenUser:
    """The member who asks for help."""
    return TokenUser(
        id=uuid4(),
        email="requester@example.com",
        display_name="Rita Requester",
    )


@pytest.fixture
def provider_user() -> TokenUser:
    """The member who offers help."""
    return TokenUser(
        id=uuid4(),
        email="provider@example.com",
        display_name="Paul Provider",
    )


@pytest.fixture
def other_user() -> TokenUser:
    """A bystander with no part in the task."""
    return TokenUser(
        id=uuid4(),
        email="other@example.com",
        display_name=None,
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key=TEST_SECRET_KEY,
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def provider_headers(auth_provider: JWTAuthProvider, provider_user: TokenUser) -> dict[str, str]:
    """Authorization headers for the provider."""
    return {"Authorization": f"Bearer {auth_provider.create_token(provider_user)}"}


@pytest.fixture
def other_headers(auth_provider: JWTAuthProvider, other_user: TokenUser) -> dict[str, str]:
    """Authorization headers for the bystander."""
    return {"Authorization": f"Bearer {auth_provider.create_token(other_user)}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def app(
    session_factory: async_sessionmaker[AsyncSession],
    test_user: TokenUser,
    provider_user: TokenUser,
    other_user: TokenUser,
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[FastAPI, None]:
    """
    Create an app wired to the test database.

    - Uses an in-memory SQLite database
    - Seeds a profile for every test user
    - Validates real HS256 tokens signed with the test secret
    - Overrides every service to use a UoW bound to the test database
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_ledger_service,
        get_profile_service,
        get_skill_service,
        get_task_service,
    )
    from domain.services.ledger_service import LedgerService
    from domain.services.profile_service import ProfileService
    from domain.services.skill_service import SkillService
    from domain.services.task_service import TaskService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    application = create_app()

    async with session_factory() as session:
        for user in (test_user, provider_user, other_user):
            session.add(
                ProfileModel(
                    id=user.id,
                    email=user.email,
                    display_name=user.display_name,
                )
            )
        await session.commit()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    application.dependency_overrides[get_auth_provider] = lambda: auth_provider
    application.dependency_overrides[get_task_service] = lambda: TaskService(test_uow_factory)
    application.dependency_overrides[get_ledger_service] = lambda: LedgerService(
        test_uow_factory
    )
    application.dependency_overrides[get_skill_service] = lambda: SkillService(
        test_uow_factory
    )
    application.dependency_overrides[get_profile_service] = lambda: ProfileService(
        test_uow_factory
    )

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client bound to the test app. Pass per-user headers on each request."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    app: FastAPI,
    test_user: TokenUser,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated test client acting as ``test_user``.

    Overrides the auth dependency to return the test user directly.
    """
    from api.dependencies.auth import get_current_user

    async def override_get_user() -> TokenUser:
        return test_user

    app.dependency_overrides[get_current_user] = override_get_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from uuid import UUID, uuid4

import pytest
import structlog
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ngo_admin.core.database import Base, get_db
from ngo_admin.core.permissions import OverridePersistence, PermissionService
from ngo_admin.core.permissions.models import UserRole
from ngo_admin.core.settings import MemorySettingsBackend
from ngo_admin.core.settings.models import SiteSetting  # noqa: F401
from ngo_admin.main import create_app


# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

AssignRoles = Callable[..., Awaitable[dict[str, str]]]


@pytest.fixture(autouse=True, scope="session")
def uncached_loggers() -> None:
    """Bind loggers to the current stdout on every call.

    A logger cached during a CliRunner invocation would keep writing to
    that invocation's stream after it is closed.
    """
    structlog.configure(cache_logger_on_first_use=False)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def settings_backend() -> MemorySettingsBackend:
    """Empty process-local settings backend."""
    return MemorySettingsBackend()


@pytest.fixture
def permission_service(settings_backend: MemorySettingsBackend) -> PermissionService:
    """PermissionService with no overrides, backed by the memory backend."""
    return PermissionService(OverridePersistence(settings_backend))


@pytest.fixture
async def app(
    permission_service: PermissionService,
    session_factory: async_sessionmaker[AsyncSession],
):
    """Create test application instance."""
    application = create_app(permission_service)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session
            await session.commit()

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def assign_roles(session_factory: async_sessionmaker[AsyncSession]) -> AssignRoles:
    """Create a user holding the given roles.

    Returns:
        Async function taking role identifiers and returning request headers
        that identify the new user
    """

    async def _assign(*roles: str, user_id: UUID | None = None) -> dict[str, str]:
        user_id = user_id or uuid4()
        async with session_factory() as session:
            session.add_all(UserRole(user_id=user_id, role=role) for role in roles)
            await session.commit()
        return {"X-User-Id": str(user_id)}

    return _assign

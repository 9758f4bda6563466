"""
Shared fixtures.

Environment is set before any app module is imported: the settings object is
built once per process and the JWT secrets are mandatory.
"""

import os

os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DEBUG", "false")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file with all tables created."""
    import app.models  # noqa: F401
    from app.db.session import Base

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def token_service():
    from app.services.token_service import TokenService

    return TokenService(access_secret="test-access-secret", refresh_secret="test-refresh-secret")


@pytest.fixture
def user_store(db):
    from app.services.user_store import UserStore

    return UserStore(db)


@pytest.fixture
def auth_service(user_store, token_service):
    """Orchestrator with the default behaviour: only refresh persists the digest."""
    from app.services.auth_service import AuthService

    return AuthService(store=user_store, tokens=token_service)


@pytest.fixture
def persisting_auth_service(user_store, token_service):
    """Orchestrator that also stores the refresh digest on register/login."""
    from app.services.auth_service import AuthService

    return AuthService(store=user_store, tokens=token_service, persist_refresh_on_issue=True)


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client wired to the app, with the database swapped for the test file."""
    from main import app
    from app.db.session import get_db
    from app.core.rate_limiter import rate_limiter

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    rate_limiter.clear()

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()

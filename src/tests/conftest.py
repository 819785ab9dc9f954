"""Shared test fixtures for upwatch tests."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from upwatch.app.config import get_settings
from upwatch.core.models import User, UserRecord
from upwatch.core.security import hash_password
from upwatch.infra import close_db, get_session, get_session_factory, init_db
from upwatch.infra.stores import EndpointStore, ServiceStore, UserStore, WorkspaceStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Plain-text logs and a fresh settings cache for every test."""
    monkeypatch.setenv("UPWATCH_LOGGING__JSON_FORMAT", "false")
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite database with all tables created."""
    engine = await init_db(TEST_DATABASE_URL, create_tables=True)
    yield engine
    await close_db()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncSession:
    async with get_session_factory()() as session:
        yield session


@pytest.fixture
def user_store(db_session: AsyncSession) -> UserStore:
    return UserStore(db_session)


@pytest.fixture
def workspace_store(db_session: AsyncSession) -> WorkspaceStore:
    return WorkspaceStore(db_session)


@pytest.fixture
def service_store(db_session: AsyncSession) -> ServiceStore:
    return ServiceStore(db_session)


@pytest.fixture
def endpoint_store(db_session: AsyncSession) -> EndpointStore:
    return EndpointStore(db_session)


async def _make_user(store: UserStore, email: str, full_name: str) -> UserRecord:
    return await store.create(
        User(
            email=email,
            password_hash=hash_password(TEST_PASSWORD),
            full_name=full_name,
        )
    )


@pytest_asyncio.fixture
async def alice(user_store: UserStore) -> UserRecord:
    return await _make_user(user_store, "alice@example.com", "Alice")


@pytest_asyncio.fixture
async def bob(user_store: UserStore) -> UserRecord:
    return await _make_user(user_store, "bob@example.com", "Bob")


@pytest.fixture
def password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def app(db_engine):
    """FastAPI app wired to the test database."""
    from upwatch.app.main import app

    async def override_get_session():
        async with get_session_factory()() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncClient:
    """Unauthenticated client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def login_as(app):
    """Factory returning a client registered (and logged in) as ``email``.

    Each call gets its own cookie jar, so several users can act in one test.
    """
    clients: list[AsyncClient] = []

    async def _login_as(email: str, full_name: str = "Test User") -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        response = await ac.post(
            "/api/v1/auth/register",
            json={"email": email, "password": TEST_PASSWORD, "full_name": full_name},
        )
        assert response.status_code == 201, response.text
        return ac

    yield _login_as

    for ac in clients:
        await ac.aclose()


@pytest.fixture
def deleted_at_of(db_engine):
    """Read ``deleted_at`` for ``ids`` through a fresh session.

    Bypasses the identity map of the session under test, so the values are
    what is actually committed.
    """

    async def _deleted_at_of(model, ids: list[str]) -> list:
        async with get_session_factory()() as fresh:
            result = await fresh.execute(
                select(col(model.deleted_at)).where(col(model.id).in_(ids))
            )
            return list(result.scalars().all())

    return _deleted_at_of


@pytest.fixture
def fail_on_statement(db_session: AsyncSession, monkeypatch):
    """Make the ``n``-th ``execute`` on the test session raise OperationalError.

    Earlier statements run normally, so a multi-statement write is
    interrupted partway through.
    """

    def _fail_on_statement(n: int) -> None:
        real_execute = db_session.execute
        calls = 0

        async def execute(statement, *args, **kwargs):
            nonlocal calls
            calls += 1
            if calls == n:
                raise OperationalError(str(statement), {}, Exception("connection lost"))
            return await real_execute(statement, *args, **kwargs)

        monkeypatch.setattr(db_session, "execute", execute)

    return _fail_on_statement

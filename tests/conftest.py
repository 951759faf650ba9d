"""Shared test fixtures for oidcgate."""

from collections.abc import AsyncIterator

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from oidcgate.core.app import create_app
from oidcgate.core.settings import AuthSettings, DatabaseSettings
from oidcgate.db.engine import create_schema, create_session_factory
from oidcgate.db.kv_store import KeyValueStore
from oidcgate.db.repo_session import SessionManager
from oidcgate.db.repo_user import UserDirectory
from tests.support import CLIENT_ID, CLIENT_SECRET, DOMAIN, REDIRECT_URI, FakeProvider

MEMORY_DB_URL = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set environment variables for test settings."""
    monkeypatch.setenv("AUTH0_CLIENT_SECRET", CLIENT_SECRET)
    monkeypatch.setenv("AUTH0_DOMAIN", DOMAIN)
    monkeypatch.setenv("AUTH0_CLIENT_ID", CLIENT_ID)
    monkeypatch.setenv("AUTH0_REDIRECT_URI", REDIRECT_URI)


@pytest.fixture
def auth_settings(tmp_path) -> AuthSettings:
    return AuthSettings(
        domain=DOMAIN,
        client_id=CLIENT_ID,
        client_secret=SecretStr(CLIENT_SECRET),
        redirect_uri=REDIRECT_URI,
        static_dir=str(tmp_path / "static"),
    )


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with the schema created."""
    eng = create_async_engine(MEMORY_DB_URL, echo=False)
    await create_schema(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def store(engine: AsyncEngine) -> KeyValueStore:
    return KeyValueStore(create_session_factory(engine))


@pytest.fixture
def users(store: KeyValueStore) -> UserDirectory:
    return UserDirectory(store)


@pytest.fixture
def sessions(store: KeyValueStore, users: UserDirectory) -> SessionManager:
    return SessionManager(store, users)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
async def http_client(provider: FakeProvider) -> AsyncIterator[httpx.AsyncClient]:
    """Outbound client routed to the fake identity provider."""
    async with httpx.AsyncClient(transport=provider.transport()) as ac:
        yield ac


@pytest.fixture
async def app(
    auth_settings: AuthSettings, provider: FakeProvider
) -> AsyncIterator[FastAPI]:
    """Application with startup run against the fake provider."""
    application = create_app(
        settings=auth_settings,
        db_settings=DatabaseSettings(url=MEMORY_DB_URL),
        transport=provider.transport(),
    )
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """httpx test client over ASGI; https so Secure cookies round-trip."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as ac:
        yield ac

"""FastAPI application factory for the oidcgate login service."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from oidcgate.api.routes_pages import router as pages_router
from oidcgate.core.settings import AuthSettings, DatabaseSettings, load_settings
from oidcgate.crypto.certs import provision_signing_keys
from oidcgate.db.engine import create_engine, create_schema, create_session_factory
from oidcgate.db.kv_store import KeyValueStore
from oidcgate.db.repo_session import SessionManager
from oidcgate.db.repo_user import UserDirectory
from oidcgate.oidc.flow import OAuthFlowController
from oidcgate.oidc.routes_login import router as login_router

logger = logging.getLogger(__name__)


def create_app(
    settings: AuthSettings | None = None,
    db_settings: DatabaseSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Settings are loaded here so a missing client secret stops the process
    before it serves anything. The signing key is provisioned during
    startup; a failure there aborts startup too.
    """
    auth = settings or load_settings()
    db = db_settings or DatabaseSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        engine = create_engine(db)
        await create_schema(engine)
        store = KeyValueStore(create_session_factory(engine))
        client = httpx.AsyncClient(timeout=auth.http_timeout, transport=transport)
        try:
            await provision_signing_keys(store, auth.domain, client)
            users = UserDirectory(store)
            sessions = SessionManager(store, users)
            app.state.settings = auth
            app.state.store = store
            app.state.users = users
            app.state.sessions = sessions
            app.state.flow = OAuthFlowController(auth, store, client, users, sessions)
            logger.info("Serving logins for %s (client_id=%s)", auth.domain, auth.client_id)
            yield
        finally:
            await client.aclose()
            await engine.dispose()

    app = FastAPI(
        title="oidcgate",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(pages_router)
    app.include_router(login_router)
    if Path(auth.static_dir).is_dir():
        app.mount("/static", StaticFiles(directory=auth.static_dir), name="static")

    return app

"""FastAPI dependency injection for the components built at startup."""

from typing import Annotated

from fastapi import Depends, Request

from oidcgate.auth.guard import authenticate
from oidcgate.core.settings import AuthSettings
from oidcgate.db.records import User
from oidcgate.db.repo_session import SessionManager
from oidcgate.oidc.flow import OAuthFlowController


def get_settings(request: Request) -> AuthSettings:
    return request.app.state.settings


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_flow(request: Request) -> OAuthFlowController:
    return request.app.state.flow


async def current_user(
    request: Request,
    sessions: Annotated[SessionManager, Depends(get_sessions)],
) -> User | None:
    """Resolve the session cookie before a protected handler runs."""
    return await authenticate(request.cookies, sessions)


Settings = Annotated[AuthSettings, Depends(get_settings)]
Flow = Annotated[OAuthFlowController, Depends(get_flow)]
CurrentUser = Annotated[User | None, Depends(current_user)]

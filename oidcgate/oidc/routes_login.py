"""Login redirect and provider callback endpoints."""

import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from oidcgate.api.deps import Flow, Settings
from oidcgate.auth.guard import SESSION_COOKIE
from oidcgate.core.errors import (
    HTTP_BAD_REQUEST,
    AuthError,
    DeserializationError,
    MalformedJWTError,
    SerializationError,
    status_for_error,
)
from oidcgate.oidc.state import STATE_COOKIE, check_state, generate_state

logger = logging.getLogger(__name__)

router = APIRouter()

HTTP_FOUND = 302
LOGGED_IN_PATH = "/loggedin"


def _error_response(status_code: int) -> JSONResponse:
    """Coarse error body; the reason is only logged."""
    error = HTTPStatus(status_code).phrase.lower().replace(" ", "_")
    return JSONResponse({"error": error}, status_code=status_code)


@router.get("/auth0")
async def login_redirect(flow: Flow, settings: Settings) -> RedirectResponse:
    """GET /auth0 -- start a login attempt at the provider."""
    state = generate_state()
    response = RedirectResponse(url=flow.authorize_url(state), status_code=HTTP_FOUND)
    response.set_cookie(
        STATE_COOKIE,
        state,
        max_age=settings.state_cookie_max_age,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
    )
    return response


@router.get("/callback", response_model=None)
async def login_callback(
    request: Request,
    flow: Flow,
    settings: Settings,
    code: Annotated[str | None, Query()] = None,
    state: Annotated[str | None, Query()] = None,
) -> RedirectResponse | JSONResponse:
    """GET /callback -- finish the login and issue the session cookie.

    The state cookie is single-use and is cleared whatever the outcome.
    """
    response: RedirectResponse | JSONResponse
    try:
        check_state(request.cookies.get(STATE_COOKIE), state)
        if not code:
            logger.info("Callback without an authorization code")
            response = _error_response(HTTP_BAD_REQUEST)
        else:
            login = await flow.complete_login(code)
            response = RedirectResponse(url=LOGGED_IN_PATH, status_code=HTTP_FOUND)
            response.set_cookie(
                SESSION_COOKIE,
                login.session_key,
                path="/",
                secure=settings.cookie_secure,
                httponly=True,
            )
    except AuthError as exc:
        logger.warning("Login failed: %s (%s)", exc.kind.value, exc.detail)
        if isinstance(exc, MalformedJWTError):
            logger.debug("Rejected token: %s", exc.representation)
        response = _error_response(status_for_error(exc))
    except (SerializationError, DeserializationError, SQLAlchemyError) as exc:
        logger.exception("Login failed while persisting the session")
        response = _error_response(status_for_error(exc))

    response.delete_cookie(
        STATE_COOKIE, path="/", secure=settings.cookie_secure, httponly=True
    )
    return response


@router.get(LOGGED_IN_PATH)
async def logged_in() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=HTTP_FOUND)

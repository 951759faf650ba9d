"""Per-request resolution of the session cookie into a user."""

import logging
from collections.abc import Mapping

from sqlalchemy.exc import SQLAlchemyError

from oidcgate.core.errors import DeserializationError
from oidcgate.db.records import User
from oidcgate.db.repo_session import SessionManager

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"


async def authenticate(
    cookies: Mapping[str, str], sessions: SessionManager
) -> User | None:
    """Return the authenticated user, or None to forward the request.

    A missing cookie, unknown or expired session, missing user record and
    unreadable store entries all mean "not authenticated".
    """
    session_key = cookies.get(SESSION_COOKIE)
    if not session_key:
        return None
    try:
        return await sessions.resolve(session_key)
    except (DeserializationError, SQLAlchemyError) as exc:
        logger.warning("Session %s... could not be resolved: %s", session_key[:8], exc)
        return None

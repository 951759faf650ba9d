"""Session creation and resolution keyed by the hash of the ID token."""

import hashlib
import logging

from oidcgate.db.kv_store import SESSIONS_PREFIX, KeyValueStore, make_key
from oidcgate.db.records import Session, User, decode_record, encode_record
from oidcgate.db.repo_user import UserDirectory

logger = logging.getLogger(__name__)


def hash_token(raw_token: bytes) -> str:
    """SHA-256 hex digest of a raw token, used as the session key."""
    return hashlib.sha256(raw_token).hexdigest()


class SessionManager:
    """Creates, persists and validates login sessions."""

    def __init__(self, store: KeyValueStore, users: UserDirectory) -> None:
        self._store = store
        self._users = users

    async def create(self, user_id: str, expires: int, raw_token: bytes) -> str:
        """Persist a session and return its key (the session cookie value)."""
        session_key = hash_token(raw_token)
        record = Session(user_id=user_id, expires=expires, raw_token=raw_token)
        await self._store.set(
            make_key(SESSIONS_PREFIX, session_key), encode_record(record, "session")
        )
        logger.info("Created session %s... for user %s", session_key[:8], user_id)
        return session_key

    async def get(self, session_key: str) -> Session | None:
        raw = await self._store.get(make_key(SESSIONS_PREFIX, session_key))
        if raw is None:
            return None
        return decode_record(raw, Session, "session")

    async def resolve(self, session_key: str, now: int | None = None) -> User | None:
        """Return the user owning an unexpired session, else None.

        Expired sessions are left in the store; they simply stop resolving.
        A session whose user record is gone also resolves to None.
        """
        session = await self.get(session_key)
        if session is None or session.expired(now):
            return None
        user = await self._users.get(session.user_id)
        if user is None:
            logger.warning(
                "Session %s... references missing user %s",
                session_key[:8],
                session.user_id,
            )
        return user

"""User directory backed by the key-value store."""

import logging

from oidcgate.core.errors import DeserializationError
from oidcgate.db.kv_store import USERS_PREFIX, KeyValueStore, make_key
from oidcgate.db.records import User, decode_record, encode_record

logger = logging.getLogger(__name__)


class UserDirectory:
    """Maps provider user identifiers to local User records.

    Records are created on first sight and never updated afterwards: a
    later login with a different email for the same user_id keeps the
    email stored at creation.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def get(self, user_id: str) -> User | None:
        """Look up a user by provider identifier."""
        raw = await self._store.get(make_key(USERS_PREFIX, user_id))
        if raw is None:
            return None
        return decode_record(raw, User, "user")

    async def get_or_create(self, user_id: str, email: str) -> User:
        """Return the stored user, creating it if none exists."""
        existing = await self.get(user_id)
        if existing is not None:
            return existing

        user = User(user_id=user_id, email=email)
        created = await self._store.set_if_absent(
            make_key(USERS_PREFIX, user_id), encode_record(user, "user")
        )
        if created:
            logger.info("Created user %s", user_id)
            return user

        # A concurrent login created the record first; return what it stored.
        stored = await self.get(user_id)
        if stored is None:
            raise DeserializationError("user")
        return stored

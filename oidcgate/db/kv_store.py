"""Byte-keyed persistent store shared by every component."""

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from oidcgate.db.models_kv import KVEntryEntity

USERS_PREFIX = "users/"
SESSIONS_PREFIX = "sessions/"

JWT_PUB_KEY_PEM = b"jwt_pub_key_pem"
JWT_PUB_KEY_DER = b"jwt_pub_key_der"
JWT_CERT_DER = b"jwt_cert_der"


def make_key(prefix: str, ident: str) -> bytes:
    """Build a store key namespaced by entity type, e.g. ``users/<id>``."""
    return f"{prefix}{ident}".encode()


class KeyValueStore:
    """Durable get/set over opaque bytes.

    Every operation runs in its own session and transaction, so one
    instance can be shared by concurrent requests.
    """

    def __init__(self, factory: async_sessionmaker[AsyncSession]) -> None:
        self._factory = factory

    async def get(self, key: bytes) -> bytes | None:
        """Return the value stored under key, or None."""
        async with self._factory() as session:
            stmt = select(KVEntryEntity.value).where(KVEntryEntity.key == key)
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def set(self, key: bytes, value: bytes) -> None:
        """Insert or overwrite the value stored under key."""
        async with self._factory() as session:
            dialect = session.get_bind().dialect.name
            insert = pg_insert if dialect == "postgresql" else sqlite_insert
            stmt = insert(KVEntryEntity).values(key=key, value=value)
            stmt = stmt.on_conflict_do_update(
                index_elements=[KVEntryEntity.key],
                set_={"value": stmt.excluded.value},
            )
            try:
                await session.execute(stmt)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def set_if_absent(self, key: bytes, value: bytes) -> bool:
        """Insert value under key unless the key exists; True if inserted."""
        async with self._factory() as session:
            dialect = session.get_bind().dialect.name
            insert = pg_insert if dialect == "postgresql" else sqlite_insert
            stmt = (
                insert(KVEntryEntity)
                .values(key=key, value=value)
                .on_conflict_do_nothing(index_elements=[KVEntryEntity.key])
            )
            try:
                result = await session.execute(stmt)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            return result.rowcount == 1

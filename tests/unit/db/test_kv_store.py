"""Tests for the byte-keyed store."""

from oidcgate.db.kv_store import (
    SESSIONS_PREFIX,
    USERS_PREFIX,
    KeyValueStore,
    make_key,
)


class TestMakeKey:
    """Tests for namespaced key construction."""

    def test_prefixes_entity_type(self) -> None:
        assert make_key(USERS_PREFIX, "u-1") == b"users/u-1"
        assert make_key(SESSIONS_PREFIX, "abc") == b"sessions/abc"

    def test_same_id_differs_across_namespaces(self) -> None:
        assert make_key(USERS_PREFIX, "x") != make_key(SESSIONS_PREFIX, "x")


class TestKeyValueStore:
    """Tests for get/set semantics."""

    async def test_missing_key_returns_none(self, store: KeyValueStore) -> None:
        assert await store.get(b"nope") is None

    async def test_set_then_get(self, store: KeyValueStore) -> None:
        await store.set(b"k", b"\x00\x01binary\xff")
        assert await store.get(b"k") == b"\x00\x01binary\xff"

    async def test_set_overwrites(self, store: KeyValueStore) -> None:
        await store.set(b"k", b"first")
        await store.set(b"k", b"second")
        assert await store.get(b"k") == b"second"

    async def test_set_if_absent_inserts_new_key(self, store: KeyValueStore) -> None:
        assert await store.set_if_absent(b"k", b"first") is True
        assert await store.get(b"k") == b"first"

    async def test_set_if_absent_keeps_existing(self, store: KeyValueStore) -> None:
        await store.set(b"k", b"first")
        assert await store.set_if_absent(b"k", b"second") is False
        assert await store.get(b"k") == b"first"

"""Unit tests for searchcache.storage."""

from __future__ import annotations

import aiosqlite
import pytest

from searchcache.errors import StorageError
from searchcache.storage import MemoryStorage, SqliteStorage


@pytest.fixture()
async def sqlite_storage() -> SqliteStorage:
    async with aiosqlite.connect(":memory:") as db:
        storage = SqliteStorage(db)
        await storage.init_db()
        yield storage


class TestMemoryStorage:
    async def test_set_get_remove(self) -> None:
        storage = MemoryStorage()
        await storage.set_item("k", "v")
        assert await storage.get_item("k") == "v"
        await storage.remove_item("k")
        assert await storage.get_item("k") is None

    async def test_remove_missing_is_noop(self) -> None:
        await MemoryStorage().remove_item("missing")

    async def test_quota_exceeded_raises(self) -> None:
        storage = MemoryStorage(quota_bytes=10)
        with pytest.raises(StorageError):
            await storage.set_item("key", "a much too long value")
        assert await storage.get_item("key") is None

    async def test_quota_counts_replaced_value_once(self) -> None:
        storage = MemoryStorage(quota_bytes=10)
        await storage.set_item("k", "12345678")
        await storage.set_item("k", "87654321")
        assert await storage.get_item("k") == "87654321"


class TestSqliteStorage:
    async def test_set_and_get(self, sqlite_storage: SqliteStorage) -> None:
        await sqlite_storage.set_item("jobs:history", "[]")
        assert await sqlite_storage.get_item("jobs:history") == "[]"

    async def test_get_missing_returns_none(self, sqlite_storage: SqliteStorage) -> None:
        assert await sqlite_storage.get_item("nope") is None

    async def test_set_overwrites(self, sqlite_storage: SqliteStorage) -> None:
        await sqlite_storage.set_item("k", "1")
        await sqlite_storage.set_item("k", "2")
        assert await sqlite_storage.get_item("k") == "2"

    async def test_remove(self, sqlite_storage: SqliteStorage) -> None:
        await sqlite_storage.set_item("k", "1")
        await sqlite_storage.remove_item("k")
        assert await sqlite_storage.get_item("k") is None

    async def test_read_failure_returns_none(self, sqlite_storage: SqliteStorage) -> None:
        """Simulate a database read error; should return None, not raise."""
        original_execute = sqlite_storage._db.execute

        async def failing_execute(*args, **kwargs):
            raise aiosqlite.OperationalError("disk I/O error")

        sqlite_storage._db.execute = failing_execute  # type: ignore[assignment]
        assert await sqlite_storage.get_item("k") is None
        sqlite_storage._db.execute = original_execute  # type: ignore[assignment]

    async def test_write_failure_raises_storage_error(
        self, sqlite_storage: SqliteStorage
    ) -> None:
        original_execute = sqlite_storage._db.execute

        async def failing_execute(*args, **kwargs):
            raise aiosqlite.OperationalError("database or disk is full")

        sqlite_storage._db.execute = failing_execute  # type: ignore[assignment]
        with pytest.raises(StorageError):
            await sqlite_storage.set_item("k", "v")
        sqlite_storage._db.execute = original_execute  # type: ignore[assignment]

    async def test_closed_connection_degrades(self) -> None:
        db = await aiosqlite.connect(":memory:")
        storage = SqliteStorage(db)
        await storage.init_db()
        await db.close()

        assert await storage.get_item("k") is None
        with pytest.raises(StorageError):
            await storage.set_item("k", "v")
        with pytest.raises(StorageError):
            await storage.remove_item("k")

"""Persistent key-value media backing the caches, session view and history.

Both backends store plain strings; serialisation is the caller's job.
Read failures are logged and reported as a missing key. Write failures raise
``StorageError`` so the caller decides whether to carry on from memory.
"""

from __future__ import annotations

import aiosqlite
import structlog

from searchcache.errors import StorageError

log = structlog.get_logger()

# aiosqlite raises ValueError once its connection is closed
_DB_ERRORS = (aiosqlite.Error, ValueError)

_CREATE_KV_TABLE = """
CREATE TABLE IF NOT EXISTS kv_store (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""


class MemoryStorage:
    """In-process medium with an optional size quota.

    ``quota_bytes`` mimics a browser's storage limit: a write that would push
    the total UTF-8 size of keys and values past it raises ``StorageError``.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            others = sum(
                len(k.encode()) + len(v.encode()) for k, v in self._items.items() if k != key
            )
            needed = others + len(key.encode()) + len(value.encode())
            if needed > self._quota_bytes:
                raise StorageError(
                    f"Storage quota exceeded writing {key!r}: {needed} > {self._quota_bytes} bytes"
                )
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items


class SqliteStorage:
    """SQLite-backed medium implementing KeyValueStorage."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create the table and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_KV_TABLE)
        await self._db.commit()

    async def get_item(self, key: str) -> str | None:
        """Read a value. Returns ``None`` on a missing key or read failure."""
        try:
            cursor = await self._db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
        except _DB_ERRORS:
            log.warning("storage_read_error", key=key, exc_info=True)
            return None
        return None if row is None else row[0]

    async def set_item(self, key: str, value: str) -> None:
        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, value),
            )
            await self._db.commit()
        except _DB_ERRORS as exc:
            raise StorageError(f"Failed to write {key!r}: {exc}") from exc

    async def remove_item(self, key: str) -> None:
        try:
            await self._db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await self._db.commit()
        except _DB_ERRORS as exc:
            raise StorageError(f"Failed to remove {key!r}: {exc}") from exc

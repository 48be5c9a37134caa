"""Keyed search-result cache mirrored to a persistent key-value medium.

Reads are served from the in-memory map. Every ``set`` rewrites the whole
map to the medium. Infrastructure errors never cross the CacheStore
boundary: malformed persisted data loads as an empty cache and failed writes
are logged while the in-memory copy keeps serving.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import TypeAdapter, ValidationError

from searchcache.errors import StorageError
from searchcache.freshness import utcnow
from searchcache.models.cache import CacheEntry

if TYPE_CHECKING:
    from searchcache.protocols import KeyValueStorage

log = structlog.get_logger()

_ENTRIES = TypeAdapter(list[CacheEntry])


class CacheStore:
    """Search-result cache for a single category page."""

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str,
        *,
        max_entries: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> list[dict] | None:
        """Return the cached payload for ``key`` or ``None`` on a miss."""
        entry = self._entries.get(key)
        return None if entry is None else list(entry.payload)

    def entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    async def set(self, key: str, payload: list[dict]) -> None:
        """Store ``payload`` under ``key``, replacing any previous entry, and persist."""
        # Re-insert so dict order tracks write order
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(key=key, payload=list(payload), stored_at=self._clock())
        self._evict_overflow()
        await self.persist_all()

    async def clear(self) -> None:
        self._entries.clear()
        try:
            await self._storage.remove_item(self._storage_key)
        except StorageError:
            log.warning("storage_write_error", key=self._storage_key, exc_info=True)

    async def load_all(self) -> None:
        """Hydrate the in-memory map from the medium. Non-fatal on bad data."""
        raw = await self._storage.get_item(self._storage_key)
        if raw is None:
            return
        try:
            entries = _ENTRIES.validate_json(raw)
        except ValidationError:
            log.warning("cache_load_malformed", key=self._storage_key, exc_info=True)
            return

        for entry in entries:
            self._entries[entry.key] = entry
        log.debug("cache_loaded", key=self._storage_key, entries=len(entries))

    async def persist_all(self) -> None:
        """Write the whole map back to the medium. Non-fatal on failure."""
        data = _ENTRIES.dump_json(list(self._entries.values())).decode("utf-8")
        try:
            await self._storage.set_item(self._storage_key, data)
        except StorageError:
            log.warning("storage_write_error", key=self._storage_key, exc_info=True)

    def _evict_overflow(self) -> None:
        if self._max_entries is None or len(self._entries) <= self._max_entries:
            return
        by_age = sorted(self._entries.values(), key=lambda e: e.stored_at)
        for entry in by_age[: len(self._entries) - self._max_entries]:
            del self._entries[entry.key]
            log.debug("cache_evicted", key=entry.key)

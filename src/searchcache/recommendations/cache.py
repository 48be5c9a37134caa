"""Recommendation cache, namespaced apart from the raw search cache.

Same fail-soft contract as CacheStore: malformed persisted data reads as an
empty cache, failed writes are logged and the in-memory copy keeps serving.
Freshness is not decided here; the refresher applies its own policy.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import TypeAdapter, ValidationError

from searchcache.errors import StorageError
from searchcache.freshness import utcnow
from searchcache.models.cache import RecommendationCacheEntry

if TYPE_CHECKING:
    from searchcache.models.recommendation import RecommendationItem
    from searchcache.models.search import HistoryEntry
    from searchcache.protocols import KeyValueStorage

log = structlog.get_logger()

_ENTRIES = TypeAdapter(dict[str, RecommendationCacheEntry])


class RecommendationCache:
    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._clock = clock
        self._entries: dict[str, RecommendationCacheEntry] | None = None

    async def get(self, key: str) -> RecommendationCacheEntry | None:
        entries = await self._load()
        return entries.get(key)

    async def set(
        self, key: str, items: list[RecommendationItem], based_on: HistoryEntry
    ) -> RecommendationCacheEntry:
        entries = await self._load()
        entry = RecommendationCacheEntry(
            key=key, items=items, stored_at=self._clock(), based_on=based_on
        )
        entries[key] = entry
        data = _ENTRIES.dump_json(entries).decode("utf-8")
        try:
            await self._storage.set_item(self._storage_key, data)
        except StorageError:
            log.warning("storage_write_error", key=self._storage_key, exc_info=True)
        return entry

    async def clear(self) -> None:
        self._entries = {}
        try:
            await self._storage.remove_item(self._storage_key)
        except StorageError:
            log.warning("storage_write_error", key=self._storage_key, exc_info=True)

    async def _load(self) -> dict[str, RecommendationCacheEntry]:
        if self._entries is not None:
            return self._entries
        self._entries = {}
        raw = await self._storage.get_item(self._storage_key)
        if raw is not None:
            try:
                self._entries = _ENTRIES.validate_json(raw)
            except ValidationError:
                log.warning("recommendation_cache_malformed", key=self._storage_key, exc_info=True)
        return self._entries

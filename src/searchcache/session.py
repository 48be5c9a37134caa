"""The last search view of a page, persisted apart from the keyed cache."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from searchcache.errors import StorageError
from searchcache.freshness import utcnow
from searchcache.models.search import SessionState

if TYPE_CHECKING:
    from searchcache.protocols import KeyValueStorage

log = structlog.get_logger()


class SearchSessionState:
    """Saves and restores what a page showed last.

    ``restore`` does not look at the age of the record; the page compares
    ``saved_at`` against its own TTL to decide whether to re-fetch.
    """

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
        self._current: SessionState | None = None

    @property
    def current(self) -> SessionState | None:
        return self._current

    async def save(self, results: list[dict], query: str, filters: Mapping[str, str]) -> None:
        self._current = SessionState(
            query=query,
            filters=dict(filters),
            results=list(results),
            saved_at=self._clock(),
        )
        try:
            await self._storage.set_item(self._storage_key, self._current.model_dump_json())
        except StorageError:
            log.warning("storage_write_error", key=self._storage_key, exc_info=True)

    async def restore(self) -> SessionState | None:
        raw = await self._storage.get_item(self._storage_key)
        if raw is None:
            return None
        try:
            self._current = SessionState.model_validate_json(raw)
        except ValidationError:
            log.warning("session_restore_malformed", key=self._storage_key, exc_info=True)
            return None
        return self._current

    async def clear(self) -> None:
        self._current = None
        try:
            await self._storage.remove_item(self._storage_key)
        except StorageError:
            log.warning("storage_write_error", key=self._storage_key, exc_info=True)

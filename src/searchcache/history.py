"""Bounded, most-recent-first search history."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING

import structlog
from pydantic import TypeAdapter, ValidationError

from searchcache.errors import StorageError
from searchcache.models.search import HistoryEntry

if TYPE_CHECKING:
    from searchcache.protocols import KeyValueStorage

log = structlog.get_logger()

DEFAULT_HISTORY_LIMIT = 5

_ENTRIES = TypeAdapter(list[HistoryEntry])

ClearHook = Callable[[], Awaitable[None]]


class HistoryLedger:
    """Past searches of one page, deduplicated by search identity.

    Recommendations are derived from the history head, so anything caching
    them registers a clear hook; ``clear`` awaits every hook after wiping the
    ledger.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
        identity_filters: Sequence[str] | None = None,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._limit = limit
        self._identity_filters = identity_filters
        self._entries: list[HistoryEntry] = []
        self._clear_hooks: list[ClearHook] = []

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    @property
    def head(self) -> HistoryEntry | None:
        return self._entries[0] if self._entries else None

    def on_clear(self, hook: ClearHook) -> None:
        self._clear_hooks.append(hook)

    async def add(self, entry: HistoryEntry) -> list[HistoryEntry]:
        identity = entry.identity(self._identity_filters)
        kept = [e for e in self._entries if e.identity(self._identity_filters) != identity]
        self._entries = [entry, *kept][: self._limit]
        await self._persist()
        return self.entries

    async def clear(self) -> None:
        self._entries = []
        await self._persist()
        for hook in self._clear_hooks:
            await hook()
        log.info("history_cleared", key=self._storage_key)

    async def load_initial(self) -> list[HistoryEntry]:
        raw = await self._storage.get_item(self._storage_key)
        if raw is None:
            self._entries = []
            return []
        try:
            entries = _ENTRIES.validate_json(raw)
        except ValidationError:
            log.warning("history_load_malformed", key=self._storage_key, exc_info=True)
            self._entries = []
            return []
        self._entries = entries[: self._limit]
        return self.entries

    async def _persist(self) -> None:
        data = _ENTRIES.dump_json(self._entries).decode("utf-8")
        try:
            await self._storage.set_item(self._storage_key, data)
        except StorageError:
            log.warning("storage_write_error", key=self._storage_key, exc_info=True)

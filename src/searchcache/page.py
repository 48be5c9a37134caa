"""One category search page: cache, session view, history and recommendations.

A SearchPage owns one instance of each component, all backed by the same
storage medium under category-prefixed keys. Within a search the order is
fixed: cache read/write, session save, history update, then the
recommendation refresh is scheduled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from contextlib import suppress
from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from searchcache.cache import CacheStore
from searchcache.errors import ErrorCode, SearchCacheError
from searchcache.freshness import FreshnessPolicy, utcnow
from searchcache.history import HistoryLedger
from searchcache.identity import identity_from_token
from searchcache.keys import derive_key
from searchcache.models.search import HistoryEntry
from searchcache.recommendations.cache import RecommendationCache
from searchcache.recommendations.refresher import RecommendationRefresher
from searchcache.session import SearchSessionState

if TYPE_CHECKING:
    from collections.abc import Callable

    from searchcache.config import CacheSettings
    from searchcache.models.recommendation import RecommendationState
    from searchcache.models.search import SessionState
    from searchcache.protocols import (
        KeyValueStorage,
        SearchClientProtocol,
        TextGeneratorProtocol,
    )
    from searchcache.recommendations.categories import CategoryProfile


class SearchPage:
    """Search workflow for a single category."""

    def __init__(
        self,
        profile: CategoryProfile,
        storage: KeyValueStorage,
        search_client: SearchClientProtocol,
        generator: TextGeneratorProtocol,
        settings: CacheSettings,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.profile = profile
        self._search_client = search_client
        self._clock = clock
        self._log = structlog.get_logger().bind(category=profile.name)

        prefix = profile.name
        self.cache = CacheStore(
            storage,
            f"{prefix}:search_cache",
            max_entries=settings.max_entries,
            clock=clock,
        )
        self.session = SearchSessionState(storage, f"{prefix}:session", clock=clock)
        self.session_policy = FreshnessPolicy(settings.session_ttl, clock)
        self.history = HistoryLedger(
            storage,
            f"{prefix}:history",
            limit=settings.history_limit,
            identity_filters=profile.identity_filters,
        )
        self.recommendations = RecommendationRefresher(
            profile,
            generator,
            RecommendationCache(storage, f"{prefix}:recommendations", clock=clock),
            FreshnessPolicy(settings.recommendation_ttl, clock),
        )
        self.history.on_clear(self.recommendations.cache.clear)

        self._identity: str | None = None
        self._token: str | None = None
        # Strong references; the newest task is the one whose outcome is shown
        self._refresh_tasks: set[asyncio.Task[RecommendationState]] = set()
        self._latest_refresh: asyncio.Task[RecommendationState] | None = None

    @property
    def identity(self) -> str | None:
        return self._identity

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, *, token: str | None = None) -> SessionState | None:
        """Hydrate from storage and restore the last view.

        Kicks off a recommendation refresh for the history head, if any.
        """
        self._set_token(token)
        await self.cache.load_all()
        history = await self.history.load_initial()
        restored = await self.session.restore()
        self._log.info(
            "page_started",
            cached_entries=len(self.cache),
            history=len(history),
            restored=restored is not None,
        )
        if history:
            self._schedule_refresh(history[0])
        return restored

    def session_is_fresh(self, state: SessionState) -> bool:
        """Whether a restored view is recent enough to skip a background re-fetch."""
        return self.session_policy.is_fresh(state.saved_at)

    async def close(self) -> None:
        """Settle background refreshes and flush the cache.

        Superseded refreshes are cancelled; their outcome would be discarded
        anyway. The newest one is awaited so its result reaches the cache.
        """
        for task in list(self._refresh_tasks):
            if task is not self._latest_refresh:
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
        if self._latest_refresh is not None:
            await asyncio.gather(self._latest_refresh, return_exceptions=True)
        await self.cache.persist_all()

    # ------------------------------------------------------------------
    # Searching
    # ------------------------------------------------------------------

    async def search(
        self,
        query: str,
        filters: Mapping[str, str],
        *,
        token: str | None = None,
    ) -> list[dict]:
        """Run a search submission end to end.

        Raises SearchCacheError for a blank query or when the backend fails;
        history and recommendations are left untouched in both cases.
        """
        if not query.strip():
            raise SearchCacheError(
                code=ErrorCode.INVALID_INPUT,
                message="Search query must not be empty",
                suggestion="Enter a search term and submit again.",
            )
        if token is not None:
            self._set_token(token)
        filters = dict(filters)

        results = await self._fetch(query, filters)
        await self.session.save(results, query, filters)
        entry = HistoryEntry(query=query, filters=filters, timestamp=self._clock())
        await self.history.add(entry)
        self._schedule_refresh(entry)
        return results

    async def apply_history_item(
        self, entry: HistoryEntry, *, token: str | None = None
    ) -> list[dict]:
        """Re-run a past search; it moves to the head of the history."""
        return await self.search(entry.query, entry.filters, token=token)

    def _set_token(self, token: str | None) -> None:
        self._token = token
        self._identity = identity_from_token(token)

    async def _fetch(self, query: str, filters: dict[str, str]) -> list[dict]:
        key = derive_key(self._identity, query, self.profile.identity_of(filters))
        cached = self.cache.get(key)
        if cached is not None:
            self._log.info("cache_hit", key=key)
            return cached

        self._log.info("cache_miss_fetching", key=key)
        body = self.profile.search_body(query, filters)
        if self._identity:
            body["userId"] = self._identity
        results = await self._search_client.search(
            self.profile.name, body, token=self._token
        )
        await self.cache.set(key, results)
        return results

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    async def refresh_recommendations(self) -> RecommendationState:
        """The "Refresh AI" action: re-ask the collaborator for the history head."""
        head = self.history.head
        if head is None:
            return self.recommendations.state
        task = self._schedule_refresh(head, force=True)
        return await task

    async def wait_for_recommendations(self) -> RecommendationState:
        if self._refresh_tasks:
            await asyncio.gather(*self._refresh_tasks, return_exceptions=True)
        return self.recommendations.state

    def _schedule_refresh(
        self, entry: HistoryEntry, *, force: bool = False
    ) -> asyncio.Task[RecommendationState]:
        task = asyncio.create_task(
            self.recommendations.refresh(entry, self._identity, force=force)
        )
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)
        self._latest_refresh = task
        return task

    # ------------------------------------------------------------------
    # User resets
    # ------------------------------------------------------------------

    async def reset(self) -> None:
        """The "Reset" action: forget the current view, keep cache and history."""
        await self.session.clear()
        self._log.info("session_reset")

    async def clear_history(self) -> None:
        """Wipe history, the recommendation cache, and the recommendation panel."""
        await self.history.clear()
        self.recommendations.reset()

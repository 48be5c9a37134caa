"""History-driven recommendation refresh for one search page.

State machine: idle → loading → ready | empty | failed, re-entering loading
whenever the history head changes or the user asks for a refresh.

Every refresh takes a new generation number. A refresh may only publish its
outcome while its generation is still the latest, so a slow response to an
older search can never overwrite the panel for a newer one.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from searchcache.errors import SearchCacheError
from searchcache.keys import derive_key
from searchcache.models.recommendation import RecommendationItem, RecommendationState
from searchcache.recommendations.extract import extract_json_array

if TYPE_CHECKING:
    from searchcache.freshness import FreshnessPolicy
    from searchcache.models.search import HistoryEntry
    from searchcache.protocols import TextGeneratorProtocol
    from searchcache.recommendations.cache import RecommendationCache
    from searchcache.recommendations.categories import CategoryProfile

Listener = Callable[[RecommendationState], None]


class RecommendationRefresher:
    def __init__(
        self,
        profile: CategoryProfile,
        generator: TextGeneratorProtocol,
        cache: RecommendationCache,
        policy: FreshnessPolicy,
    ) -> None:
        self._profile = profile
        self._generator = generator
        self._cache = cache
        self._policy = policy
        self._generation = 0
        self._state = RecommendationState()
        self._listeners: list[Listener] = []
        self._log = structlog.get_logger().bind(category=profile.name)

    @property
    def state(self) -> RecommendationState:
        return self._state

    @property
    def cache(self) -> RecommendationCache:
        return self._cache

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def cache_key(self, entry: HistoryEntry, identity: str | None) -> str:
        return derive_key(
            identity,
            entry.query,
            self._profile.identity_of(entry.filters),
            namespace=f"recommendation-{self._profile.name}",
        )

    def reset(self) -> None:
        """Return to ``idle`` and orphan any in-flight refresh."""
        self._generation += 1
        self._publish(RecommendationState(status="idle", generation=self._generation))

    async def refresh(
        self, entry: HistoryEntry, identity: str | None, *, force: bool = False
    ) -> RecommendationState:
        """Produce recommendations for ``entry``.

        ``force`` skips the cache read (the "Refresh AI" action); the result is
        still written through. Never raises: failures end in ``failed``.
        """
        self._generation += 1
        generation = self._generation
        log = self._log.bind(generation=generation, query=entry.query)
        self._publish(RecommendationState(status="loading", generation=generation))

        key = self.cache_key(entry, identity)
        if not force:
            cached = await self._cache.get(key)
            if cached is not None and self._policy.is_fresh(cached.stored_at):
                log.info("recommendation_cache_hit")
                return self._settle(
                    generation,
                    RecommendationState(
                        status="ready",
                        items=cached.items,
                        generation=generation,
                        from_cache=True,
                    ),
                )

        log.info("recommendation_fetch_started", forced=force)
        try:
            text = await self._generator.generate(self._profile.build_prompt(entry))
        except SearchCacheError as exc:
            log.warning("recommendation_fetch_failed", code=exc.code, reason=exc.message)
            return self._settle(
                generation,
                RecommendationState(status="failed", reason=exc.message, generation=generation),
            )
        except Exception:
            log.warning("recommendation_fetch_failed", exc_info=True)
            return self._settle(
                generation,
                RecommendationState(
                    status="failed",
                    reason="Recommendation request failed",
                    generation=generation,
                ),
            )

        try:
            items = self._parse(text, entry)
        except ValidationError as exc:
            log.warning("recommendation_unusable", exc_info=True)
            return self._settle(
                generation,
                RecommendationState(status="failed", reason=str(exc), generation=generation),
            )

        if not items:
            log.info("recommendation_empty")
            return self._settle(
                generation, RecommendationState(status="empty", generation=generation)
            )

        # A superseded refresh must not repopulate a cache cleared in the meantime
        if generation == self._generation:
            await self._cache.set(key, items, entry)
        log.info("recommendation_ready", items=len(items), source=items[0].source)
        return self._settle(
            generation,
            RecommendationState(status="ready", items=items, generation=generation),
        )

    def _parse(self, text: str, entry: HistoryEntry) -> list[RecommendationItem]:
        raw = extract_json_array(text)
        if raw is None:
            self._log.info("recommendation_fallback", reason="no_json_array")
            return self._profile.fallback(entry)

        objects = [item for item in raw if isinstance(item, dict)]
        try:
            return [
                self._profile.normalize(item, entry, index) for index, item in enumerate(objects)
            ]
        except ValidationError:
            self._log.info("recommendation_fallback", reason="invalid_items", exc_info=True)
            return self._profile.fallback(entry)

    def _settle(self, generation: int, state: RecommendationState) -> RecommendationState:
        if generation != self._generation:
            self._log.info(
                "recommendation_discarded_stale",
                generation=generation,
                latest=self._generation,
                status=state.status,
            )
            return self._state
        self._publish(state)
        return state

    def _publish(self, state: RecommendationState) -> None:
        self._state = state
        for listener in self._listeners:
            listener(state)

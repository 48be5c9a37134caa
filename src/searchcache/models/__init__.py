from __future__ import annotations

from searchcache.models.cache import CacheEntry, RecommendationCacheEntry
from searchcache.models.recommendation import (
    RecommendationItem,
    RecommendationState,
    RecommendationStatus,
)
from searchcache.models.search import HistoryEntry, SessionState

__all__ = [
    # search
    "SessionState",
    "HistoryEntry",
    # cache
    "CacheEntry",
    "RecommendationCacheEntry",
    # recommendations
    "RecommendationItem",
    "RecommendationState",
    "RecommendationStatus",
]

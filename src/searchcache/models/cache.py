from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from searchcache.models.recommendation import RecommendationItem
from searchcache.models.search import HistoryEntry


class CacheEntry(BaseModel):
    """Cached result set for one (identity, query, filters) key."""

    key: str
    payload: list[dict]  # Category-specific result items, opaque to the cache
    stored_at: datetime


class RecommendationCacheEntry(BaseModel):
    """Cached recommendations, kept apart from the raw search cache."""

    key: str
    items: list[RecommendationItem]
    stored_at: datetime
    based_on: HistoryEntry

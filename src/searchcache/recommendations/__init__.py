from __future__ import annotations

from searchcache.recommendations.cache import RecommendationCache
from searchcache.recommendations.categories import (
    CATEGORIES,
    JOBS,
    PRODUCTS,
    SCHOLARSHIPS,
    UNIVERSITIES,
    CategoryProfile,
)
from searchcache.recommendations.extract import extract_json_array
from searchcache.recommendations.refresher import RecommendationRefresher

__all__ = [
    "CATEGORIES",
    "JOBS",
    "PRODUCTS",
    "SCHOLARSHIPS",
    "UNIVERSITIES",
    "CategoryProfile",
    "RecommendationCache",
    "RecommendationRefresher",
    "extract_json_array",
]

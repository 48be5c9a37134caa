"""Integration test fixtures.

Provides a SearchPage for the jobs category wired to in-memory storage,
a deterministic clock, and queued stand-ins for both HTTP collaborators.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from searchcache.page import SearchPage
from searchcache.recommendations.categories import JOBS

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from conftest import FakeClock, StubGenerator, StubSearchClient

    from searchcache.config import CacheSettings
    from searchcache.storage import MemoryStorage

JOB_RESULTS = [
    {"title": "ICU Nurse", "company": "St. David's", "location": "Austin, TX"},
    {"title": "Travel Nurse", "company": "Aya", "location": "Austin, TX"},
    {"title": "School Nurse", "company": "AISD", "location": "Austin, TX"},
]
AI_TEXT = "Here you go:\n" + json.dumps(
    [
        {"title": "Nurse Practitioner", "whyGood": "Next step up", "location": "Austin, TX"},
        {"title": "Clinical Nurse Educator", "whyGood": "Teaching path"},
    ]
)


@pytest.fixture()
def search_client(make_search_client) -> StubSearchClient:
    return make_search_client(JOB_RESULTS, JOB_RESULTS, JOB_RESULTS)


@pytest.fixture()
def generator(make_generator) -> StubGenerator:
    return make_generator(AI_TEXT, AI_TEXT, AI_TEXT)


@pytest.fixture()
def build_page(
    storage: MemoryStorage,
    cache_settings: CacheSettings,
    clock: FakeClock,
):
    """Factory so a test can open several pages over one storage medium."""

    def _build(search_client, generator) -> SearchPage:
        return SearchPage(JOBS, storage, search_client, generator, cache_settings, clock=clock)

    return _build


@pytest.fixture()
async def page(build_page, search_client, generator, make_token) -> AsyncIterator[SearchPage]:
    page = build_page(search_client, generator)
    await page.start(token=make_token({"user_id": "u42"}))
    yield page
    await page.close()

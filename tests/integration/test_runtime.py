"""Integration tests for runtime wiring over SQLite storage and live httpx clients."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
import respx

from searchcache import runtime
from searchcache.config import Settings
from searchcache.runtime import open_app

BASE = "https://api.example.com"
AI_URL = "https://ai.example.com/v1/models/m:generateContent"
RESULTS = [{"name": "Trail Runner", "price": "$89.99"}]
SCHOLARSHIP_RESULTS = [{"title": "DAAD", "sponsor": "DAAD"}]
AI_TEXT = json.dumps([{"name": "Road Runner", "whyGood": "Light"}])
AI_BODY = {"candidates": [{"content": {"parts": [{"text": AI_TEXT}]}}]}


@pytest.fixture()
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    # structlog configuration is process-global; keep the test run's defaults
    monkeypatch.setattr(runtime, "setup_logging", lambda _settings: None)
    return Settings(
        api={"base_url": BASE},
        ai={"endpoint": AI_URL, "api_key": "test-key"},
        cache={"db_path": str(tmp_path / "data" / "storage.db")},
    )


def _mock_backends() -> tuple[respx.Route, respx.Route]:
    search = respx.post(f"{BASE}/api/search/products").mock(
        return_value=httpx.Response(200, json={"success": True, "results": RESULTS})
    )
    ai = respx.post(AI_URL).mock(return_value=httpx.Response(200, json=AI_BODY))
    return search, ai


class TestOpenApp:
    async def test_builds_one_page_per_category(self, settings: Settings) -> None:
        async with open_app(settings) as state:
            assert sorted(state.pages) == ["jobs", "products", "scholarships", "universities"]
            assert state.http_client is not None
            assert state.page("jobs").identity is None

    async def test_creates_database_directory(self, settings: Settings) -> None:
        async with open_app(settings):
            pass
        assert Path(settings.cache.db_path).exists()

    async def test_scholarships_have_own_endpoint_and_storage(self, settings: Settings) -> None:
        with respx.mock:
            route = respx.post(f"{BASE}/api/search/scholarships").mock(
                return_value=httpx.Response(
                    200, json={"success": True, "results": SCHOLARSHIP_RESULTS}
                )
            )
            respx.post(AI_URL).mock(return_value=httpx.Response(200, json=AI_BODY))

            async with open_app(settings) as state:
                page = state.page("scholarships")
                results = await page.search("Biology", {"country": "Germany", "study_level": "PhD"})
                recommendation = await page.wait_for_recommendations()

                assert results == SCHOLARSHIP_RESULTS
                assert recommendation.items[0].title == "Road Runner"
                assert state.page("universities").history.entries == []

        body = json.loads(route.calls.last.request.content)
        assert body == {"country": "germany", "studyLevel": "phd", "field": "biology"}

    async def test_state_survives_restart(self, settings: Settings, make_token) -> None:
        token = make_token({"user_id": "u42"})
        with respx.mock:
            search, ai = _mock_backends()

            async with open_app(settings, token=token) as state:
                page = state.page("products")
                assert await page.search("Running Shoes", {"max_price": "120"}) == RESULTS
                recommendation = await page.wait_for_recommendations()
                assert recommendation.status == "ready"
                assert recommendation.items[0].title == "Road Runner"

            async with open_app(settings, token=token) as state:
                page = state.page("products")
                restored = page.session.current
                assert restored is not None
                assert restored.results == RESULTS
                assert page.history.head is not None
                assert page.history.head.query == "Running Shoes"
                assert (await page.wait_for_recommendations()).from_cache is True
                assert await page.search("running shoes", {"max_price": "120"}) == RESULTS
                await page.wait_for_recommendations()

        assert search.call_count == 1
        assert ai.call_count == 1
        body = json.loads(search.calls.last.request.content)
        assert body == {"query": "Running Shoes", "maxPrice": "120", "userId": "u42"}

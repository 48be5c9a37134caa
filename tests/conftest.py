"""Shared test fixtures for the searchcache test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from searchcache.config import CacheSettings
from searchcache.errors import SearchCacheError
from searchcache.storage import MemoryStorage

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Deterministic clock; call it for "now", ``advance`` to move it."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class StubGenerator:
    """Text generator returning (or raising) queued responses in order.

    When a response is an ``asyncio.Event``, the call blocks on it and then
    returns the next queued response.
    """

    def __init__(self, *responses: str | Exception | asyncio.Event) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0)
        if isinstance(response, asyncio.Event):
            await response.wait()
            response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class StubSearchClient:
    """Search backend returning queued result lists and recording requests."""

    def __init__(self, *responses: list[dict] | SearchCacheError) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, dict, str | None]] = []

    async def search(self, category: str, body: dict, *, token: str | None = None) -> list[dict]:
        self.calls.append((category, body, token))
        response = self.responses.pop(0)
        if isinstance(response, SearchCacheError):
            raise response
        return response


def _make_token(claims: dict) -> str:
    return jwt.encode(claims, "searchcache-test-secret-of-sufficient-length", algorithm="HS256")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def cache_settings() -> CacheSettings:
    return CacheSettings(db_path=":memory:")


@pytest.fixture()
def make_token() -> Callable[[dict], str]:
    """Factory for signed JWTs; identity extraction ignores the signature anyway."""
    return _make_token


@pytest.fixture()
def make_generator() -> type[StubGenerator]:
    return StubGenerator


@pytest.fixture()
def make_search_client() -> type[StubSearchClient]:
    return StubSearchClient

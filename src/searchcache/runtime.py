"""Runtime wiring.

Responsibilities (and nothing more):
- Configure structlog
- Open the storage medium and the shared HTTP client
- Build one SearchPage per category into an AppState
- Persist caches on the way out
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from searchcache.clients import GeminiClient, SearchClient, build_http_client
from searchcache.page import SearchPage
from searchcache.recommendations.categories import CATEGORIES
from searchcache.state import AppState
from searchcache.storage import SqliteStorage

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from searchcache.config import Settings

log = structlog.get_logger()


def setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def open_app(
    settings: Settings, *, token: str | None = None
) -> AsyncGenerator[AppState, None]:
    """Yield a started AppState backed by SQLite storage and a live HTTP client."""
    setup_logging(settings)

    db_path = Path(settings.cache.db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db, build_http_client(
        settings.api.timeout_seconds
    ) as client:
        storage = SqliteStorage(db)
        await storage.init_db()

        search_client = SearchClient(client, settings.api.base_url)
        generator = GeminiClient(client, settings.ai)
        state = AppState(settings=settings, storage=storage, http_client=client)
        for name, profile in CATEGORIES.items():
            page = SearchPage(profile, storage, search_client, generator, settings.cache)
            await page.start(token=token)
            state.pages[name] = page

        log.info("app_started", categories=sorted(state.pages), db_path=str(db_path))
        try:
            yield state
        finally:
            for page in state.pages.values():
                await page.close()
            log.info("app_stopped")

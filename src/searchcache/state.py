"""Application state container.

AppState is created once by ``runtime.open_app`` and handed to whatever
hosts the search pages (a UI bridge, a web handler, tests).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from searchcache.config import Settings
    from searchcache.page import SearchPage
    from searchcache.protocols import KeyValueStorage


@dataclass
class AppState:
    """Holds all shared runtime state."""

    settings: Settings
    storage: KeyValueStorage
    http_client: httpx.AsyncClient | None = None
    # Category name → page, one page per category
    pages: dict[str, SearchPage] = field(default_factory=dict)

    def page(self, category: str) -> SearchPage:
        return self.pages[category]

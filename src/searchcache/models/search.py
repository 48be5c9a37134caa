from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, Field


class SessionState(BaseModel):
    """The last view a search page showed, restored on page entry."""

    query: str
    filters: dict[str, str] = Field(default_factory=dict)
    results: list[dict] = Field(default_factory=list)
    saved_at: datetime


class HistoryEntry(BaseModel):
    """One explicit search submission."""

    query: str
    filters: dict[str, str] = Field(default_factory=dict)
    timestamp: datetime

    def identity(self, filter_names: Iterable[str] | None = None) -> tuple:
        """Deduplication identity: lower-cased query plus exact filter values.

        ``filter_names`` restricts the comparison to the filters that define
        the search; display-only labels stored alongside are ignored.
        """
        names = sorted(self.filters) if filter_names is None else sorted(filter_names)
        return (
            self.query.strip().lower(),
            tuple((name, self.filters.get(name, "")) for name in names),
        )

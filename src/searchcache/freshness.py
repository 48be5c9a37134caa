"""TTL freshness checks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    return datetime.now(UTC)


def is_fresh(stored_at: datetime, ttl: timedelta, now: datetime) -> bool:
    """True while ``stored_at`` is younger than ``ttl`` at ``now``."""
    return now - stored_at < ttl


@dataclass(frozen=True)
class FreshnessPolicy:
    """A TTL bound to a clock.

    The session view (5 minutes) and the recommendation cache (24 hours) each
    get their own policy.
    """

    ttl: timedelta
    clock: Callable[[], datetime] = field(default=utcnow)

    def is_fresh(self, stored_at: datetime) -> bool:
        return is_fresh(stored_at, self.ttl, self.clock())

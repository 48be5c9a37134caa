"""Cache key derivation shared by the search cache and the recommendation cache."""

from __future__ import annotations

import json
from collections.abc import Mapping

GUEST_IDENTITY = "guest"


def derive_key(
    identity: str | None,
    query: str,
    filters: Mapping[str, str],
    *,
    namespace: str = "search",
) -> str:
    """Return the stable cache key for a search.

    Casing never matters: ``"Nurse"`` in ``"Austin"`` and ``"nurse"`` in
    ``"austin"`` share a key. Filter order never matters. Distinct identities
    never share a key; a missing identity is the ``"guest"`` identity.
    """
    who = (identity or GUEST_IDENTITY).lower()
    normalized = sorted((name.lower(), str(value).lower()) for name, value in filters.items())
    # JSON keeps component boundaries, so "a-b"+"c" and "a"+"b-c" stay distinct
    body = json.dumps([who, query.lower(), normalized], ensure_ascii=False, separators=(",", ":"))
    return f"{namespace.lower()}:{body}"

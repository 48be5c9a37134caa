"""Identity extraction from the auth provider's bearer token.

The token's signature is NOT verified. The extracted identity only scopes
cache keys and must never be used for authorization.
"""

from __future__ import annotations

import jwt
import structlog

log = structlog.get_logger()

_IDENTITY_CLAIMS = ("user_id", "userId", "sub", "id")


def identity_from_token(token: str | None) -> str | None:
    """Return the user id carried by ``token``, or ``None`` for guests.

    Missing, malformed or claim-less tokens all degrade to ``None``.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False, "verify_aud": False},
            algorithms=["HS256", "RS256", "ES256"],
        )
    except jwt.PyJWTError:
        log.debug("identity_token_unreadable")
        return None

    for claim in _IDENTITY_CLAIMS:
        value = payload.get(claim)
        if value:
            return str(value)
    return None

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    SEARCH_FAILED = "SEARCH_FAILED"
    SEARCH_UNSUCCESSFUL = "SEARCH_UNSUCCESSFUL"
    AI_REQUEST_FAILED = "AI_REQUEST_FAILED"
    INVALID_INPUT = "INVALID_INPUT"


class SearchCacheError(Exception):
    """Raised for failures a search page has to show to the user.

    Only ``SearchPage.search`` lets this escape to callers. Recommendation
    refreshes catch it and publish a ``failed`` state instead.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }


class StorageError(Exception):
    """Raised by a key-value storage backend when a write cannot be completed.

    Components that persist through the backend catch this, log it and keep
    serving from memory.
    """

"""HTTP collaborators: the category search backend and the AI text endpoint.

Both clients receive an httpx.AsyncClient via constructor injection; the
runtime owns the client lifecycle. Neither retries; failures are raised as
SearchCacheError for the caller to surface.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog

from searchcache.errors import ErrorCode, SearchCacheError

if TYPE_CHECKING:
    from searchcache.config import AISettings

log = structlog.get_logger()

_STATUS_MESSAGES = {
    404: "API endpoint not found. Please check the server.",
    429: "Too many requests. Please wait and try again.",
    500: "Server error. Please try again later.",
}


def build_http_client(timeout_seconds: float = 30.0) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        headers={"User-Agent": "searchcache/1.0"},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


class SearchClient:
    """Client for ``POST <base>/api/search/{category}``."""

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def search(
        self, category: str, body: dict[str, Any], *, token: str | None = None
    ) -> list[dict]:
        """Run one search and return its result list.

        Raises SearchCacheError on network errors, non-2xx responses and
        ``success: false`` bodies.
        """
        url = f"{self._base_url}/api/search/{category}"
        headers = {"Authorization": f"Bearer {token or ''}"}

        try:
            response = await self._client.post(url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise SearchCacheError(
                code=ErrorCode.SEARCH_FAILED,
                message=f"Network error searching {category}: {exc}",
                suggestion="Check your connection and try again.",
                recoverable=True,
            ) from exc

        if not response.is_success:
            message = _STATUS_MESSAGES.get(
                response.status_code, f"HTTP error! status: {response.status_code}"
            )
            raise SearchCacheError(
                code=ErrorCode.SEARCH_FAILED,
                message=message,
                suggestion="Use the retry button once the service is reachable again.",
                recoverable=True,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise SearchCacheError(
                code=ErrorCode.SEARCH_UNSUCCESSFUL,
                message=f"Search backend returned a non-JSON body for {category}",
                suggestion="The search service may be misconfigured.",
                recoverable=True,
            ) from exc

        if not isinstance(data, dict) or not data.get("success"):
            raise SearchCacheError(
                code=ErrorCode.SEARCH_UNSUCCESSFUL,
                message="API returned unsuccessful response",
                suggestion="Try a different query or try again later.",
                recoverable=True,
            )

        results = data.get("results") or []
        log.info("search_complete", category=category, results=len(results))
        return [item for item in results if isinstance(item, dict)]


class GeminiClient:
    """Client for a Gemini ``generateContent`` endpoint.

    Returns the model's free-form text. An envelope without text yields an
    empty string: the call itself succeeded, so the caller falls back instead
    of failing.
    """

    def __init__(self, client: httpx.AsyncClient, settings: AISettings) -> None:
        self._client = client
        self._settings = settings

    def _request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self._settings.temperature,
                "topK": self._settings.top_k,
                "topP": self._settings.top_p,
                "maxOutputTokens": self._settings.max_output_tokens,
            },
        }

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._client.post(
                self._settings.endpoint,
                params={"key": self._settings.api_key},
                json=self._request_body(prompt),
                timeout=self._settings.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise SearchCacheError(
                code=ErrorCode.AI_REQUEST_FAILED,
                message=f"Network error calling the AI endpoint: {exc}",
                suggestion="Use Refresh AI to try again.",
                recoverable=True,
            ) from exc

        if not response.is_success:
            raise SearchCacheError(
                code=ErrorCode.AI_REQUEST_FAILED,
                message=f"AI API error: {response.status_code}",
                suggestion="Use Refresh AI to try again.",
                recoverable=True,
            )

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError):
            log.warning("ai_response_without_text", status_code=response.status_code)
            return ""

        log.info("ai_generate_complete", content_length=len(text))
        return text if isinstance(text, str) else ""

"""Protocol interfaces for swappable components.

Search pages and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight in-memory implementations
- Other storage media (browser bridge, Redis) without changing page code
"""

from __future__ import annotations

from typing import Any, Protocol


class KeyValueStorage(Protocol):
    """String-only persistent key-value medium shared by all components.

    ``set_item`` raises ``StorageError`` when the medium refuses a write.
    """

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class SearchClientProtocol(Protocol):
    """Interface for the category search backend."""

    async def search(
        self, category: str, body: dict[str, Any], *, token: str | None = None
    ) -> list[dict]: ...


class TextGeneratorProtocol(Protocol):
    """Interface for the AI text-generation collaborator."""

    async def generate(self, prompt: str) -> str: ...

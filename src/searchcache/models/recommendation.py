from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

RecommendationStatus = Literal["idle", "loading", "ready", "empty", "failed"]


class RecommendationItem(BaseModel):
    """A single recommendation, renderable and linkable without another request."""

    id: str
    title: str
    rationale: str
    links: dict[str, str]  # Provider name → outbound search URL
    primary_link: str
    source: Literal["ai", "fallback"]
    details: dict[str, Any] = Field(default_factory=dict)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Recommendation title must not be empty")
        return v

    @field_validator("links")
    @classmethod
    def validate_links(cls, v: dict[str, str]) -> dict[str, str]:
        if not v:
            raise ValueError("Recommendation needs at least one outbound link")
        return v


class RecommendationState(BaseModel):
    """Snapshot of a page's recommendation panel."""

    status: RecommendationStatus = "idle"
    items: list[RecommendationItem] = Field(default_factory=list)
    reason: str | None = None  # Set only for "failed"
    generation: int = 0
    from_cache: bool = False

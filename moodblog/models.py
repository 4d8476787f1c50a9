"""
Shared data models for the Moodblog service.

This module defines the core domain models used across multiple layers
of the application (content, resolution, CLI, API).
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ResolutionSource = Literal["generative", "heuristic", "none"]


class MoodEvent(BaseModel):
    """A mood submission broadcast to every listener."""

    prompt: str = Field(..., description="The raw mood text, possibly empty")
    timestamp: float | None = Field(
        None, description="Unix timestamp when the mood was submitted"
    )


class PostSummary(BaseModel):
    """Listing metadata for a single post."""

    model_config = ConfigDict(frozen=True)

    slug: str
    title: str
    excerpt: str = ""
    date: str | None = None
    category: str | None = None


class Post(PostSummary):
    """A post with its body and rendered HTML."""

    front_matter: dict[str, Any] = Field(default_factory=dict)
    body: str = ""
    html: str = ""


class ThemeSelection(BaseModel):
    """Result of resolving a mood to a theme identifier."""

    theme: str = Field(..., description="A known theme identifier")
    source: ResolutionSource = "heuristic"
    error: str | None = Field(
        None, description="Backend failure message when the generative path failed"
    )


class TopicSuggestion(BaseModel):
    """Result of resolving a mood to topic keywords."""

    topics: list[str] = Field(default_factory=list, max_length=3)
    source: ResolutionSource = "none"

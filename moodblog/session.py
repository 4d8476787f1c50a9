"""
Theme context and mood session for the Moodblog service.

The active theme is not global state: it is restored per request from the
visitor's `blog-theme` cookie into a ThemeContext and handed to whatever
renders the response. The MoodSession owns the pieces that are shared by
the process: the generative backend, the mood channel and the busy flag that
allows at most one outstanding theme resolution.
"""

import logging
from dataclasses import dataclass

from pydantic import BaseModel, Field

from .backend import GenerativeBackend
from .events import MoodChannel
from .models import ResolutionSource
from .resolver import resolve_topics, select_theme
from .themes import DEFAULT_THEME, ThemeDescriptor, get_theme, is_theme

logger = logging.getLogger(__name__)

THEME_COOKIE = "blog-theme"


class SessionBusy(RuntimeError):
    """Raised when a mood is submitted while another is being resolved."""


@dataclass(frozen=True)
class ThemeContext:
    """The theme a response is rendered with."""

    identifier: str = DEFAULT_THEME

    @classmethod
    def from_preference(cls, value: str | None) -> "ThemeContext":
        """Restore a stored identifier, or the default if it is missing or unknown."""
        if is_theme(value):
            return cls(identifier=value)
        return cls()

    @property
    def descriptor(self) -> ThemeDescriptor:
        return get_theme(self.identifier)


class MoodOutcome(BaseModel):
    """Result of submitting a mood for theme resolution."""

    prompt: str
    theme: str
    changed: bool = False
    source: ResolutionSource = "none"
    status: str = Field("", description="Backend progress message")
    alert: str | None = Field(None, description="One-line failure notice for the user")


class BackendStatus(BaseModel):
    ready: bool
    progress: str
    busy: bool


class MoodSession:
    """Coordinates mood submissions against a shared backend."""

    def __init__(
        self,
        backend: GenerativeBackend | None = None,
        channel: MoodChannel | None = None,
    ) -> None:
        self.backend = backend
        self.channel = channel or MoodChannel()
        self.busy = False

    @property
    def progress(self) -> str:
        if self.backend is None:
            return ""
        return self.backend.progress

    async def submit(self, prompt: str, context: ThemeContext) -> MoodOutcome:
        """
        Broadcast a mood and resolve it to a theme.

        An empty prompt is broadcast (listeners clear their filters) but leaves
        the theme unchanged.

        Raises:
            SessionBusy: If a previous submission is still being resolved
        """
        if self.busy:
            raise SessionBusy("a mood is already being resolved")

        prompt = prompt.strip()
        if not prompt:
            await self.channel.publish(prompt)
            logger.debug("Empty mood - filters cleared, theme unchanged")
            return MoodOutcome(
                prompt=prompt, theme=context.identifier, status=self.progress
            )

        self.busy = True
        try:
            await self.channel.publish(prompt)
            selection = await select_theme(prompt, self.backend)
        finally:
            self.busy = False

        alert = None
        if selection.error is not None:
            alert = f"Failed to generate theme: {selection.error}"

        return MoodOutcome(
            prompt=prompt,
            theme=selection.theme,
            changed=selection.theme != context.identifier,
            source=selection.source,
            status=self.progress,
            alert=alert,
        )

    async def suggest(self, prompt: str) -> list[str]:
        """Passive topic suggestion for a mood; empty moods get none."""
        if not prompt.strip():
            return []
        return await resolve_topics(prompt.strip(), self.backend)

    async def initialize_backend(self) -> BackendStatus:
        if self.backend is not None:
            await self.backend.initialize()
        return self.status()

    def status(self) -> BackendStatus:
        ready = self.backend is not None and self.backend.is_ready()
        return BackendStatus(ready=ready, progress=self.progress, busy=self.busy)

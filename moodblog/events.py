"""
Mood event channel for the Moodblog service.

Every mood a visitor submits, including the empty one that clears filters,
is broadcast here. Any number of listeners (the post list, a post's
suggestion panel, SSE clients) subscribe and decide for themselves how to
react.
"""

import asyncio
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from .models import MoodEvent


class MoodChannel:
    """
    In-memory broadcast of mood events.

    The channel keeps only the latest event. Subscribers are woken through a
    condition variable and an update counter instead of per-subscriber queues,
    so a slow subscriber sees the newest event rather than a backlog.
    """

    def __init__(self) -> None:
        self._latest = MoodEvent(prompt="", timestamp=time.time())
        self._condition = asyncio.Condition()
        self._update_counter = 0

    async def publish(self, prompt: str) -> MoodEvent:
        """
        Broadcast a mood to all subscribers.

        Args:
            prompt: The raw mood text, possibly empty

        Returns:
            The published MoodEvent with timestamp
        """
        async with self._condition:
            event = MoodEvent(prompt=prompt, timestamp=time.time())
            self._latest = event
            self._update_counter += 1
            self._condition.notify_all()
            return event

    async def read(self) -> MoodEvent:
        """Return the most recently published event."""
        async with self._condition:
            return self._latest

    @asynccontextmanager
    async def stream(self) -> AsyncGenerator[AsyncGenerator[MoodEvent, None], None]:
        """
        Subscribe to mood events.

        A new subscriber first receives the current event, so a page opened
        after a submission still sees the active mood. An event whose prompt
        is empty means the visitor cleared their mood: listeners drop any
        topic filter and the theme stays where it was.

        Yields:
            An async generator producing the latest event first, then each
            subsequent one
        """

        async def event_generator() -> AsyncGenerator[MoodEvent, None]:
            async with self._condition:
                last_seen_counter = self._update_counter
                yield self._latest

            try:
                while True:
                    async with self._condition:
                        await self._condition.wait_for(
                            lambda: self._update_counter > last_seen_counter
                        )
                        last_seen_counter = self._update_counter
                        yield self._latest

            except (asyncio.CancelledError, GeneratorExit):
                return

        yield event_generator()

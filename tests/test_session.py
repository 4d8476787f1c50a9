"""
Tests for ThemeContext and MoodSession.
"""

import asyncio

import pytest
from fakes import FakeBackend

from moodblog.session import MoodSession, SessionBusy, ThemeContext
from moodblog.themes import THEMES

# MARK: - Theme Context


class TestThemeContext:
    def test_restores_valid_preference(self):
        context = ThemeContext.from_preference("space")
        assert context.identifier == "space"
        assert context.descriptor is THEMES["space"]

    @pytest.mark.parametrize("value", [None, "", "bogus", "SPACE"])
    def test_invalid_preference_defaults_to_beach(self, value):
        assert ThemeContext.from_preference(value).identifier == "beach"


# MARK: - Mood Session


class TestMoodSession:
    """Mood submission, busy gating and passive suggestions."""

    def setup_method(self):
        self.context = ThemeContext()

    async def test_empty_mood_leaves_theme_unchanged(self):
        backend = FakeBackend(responses=["space"])
        session = MoodSession(backend)

        outcome = await session.submit("   ", ThemeContext("autumn"))

        assert outcome.theme == "autumn"
        assert outcome.changed is False
        assert outcome.source == "none"
        assert backend.prompts == []
        assert (await session.channel.read()).prompt == ""

    async def test_mood_is_broadcast_and_resolved(self):
        session = MoodSession()

        outcome = await session.submit("I feel so angry and frustrated", self.context)

        assert outcome.theme == "pastel"
        assert outcome.changed is True
        assert outcome.source == "heuristic"
        assert outcome.alert is None
        assert (await session.channel.read()).prompt == "I feel so angry and frustrated"
        assert session.busy is False

    async def test_same_theme_is_not_a_change(self):
        session = MoodSession()
        outcome = await session.submit("so sad", ThemeContext("beach"))
        assert outcome.theme == "beach"
        assert outcome.changed is False

    async def test_backend_theme(self):
        session = MoodSession(FakeBackend(responses=["Desert."]))
        outcome = await session.submit("everything at once", self.context)
        assert outcome.theme == "desert"
        assert outcome.source == "generative"

    async def test_backend_failure_alerts(self):
        """Only the explicit theme action reports backend failures."""
        session = MoodSession(FakeBackend(error=RuntimeError("boom")))

        outcome = await session.submit("bored", self.context)

        assert outcome.theme == "festive"
        assert outcome.alert == "Failed to generate theme: boom"

    async def test_concurrent_submission_is_rejected(self):
        session = MoodSession(FakeBackend(responses=["space"], delay=0.05))

        first = asyncio.create_task(session.submit("stuck", self.context))
        await asyncio.sleep(0.01)
        assert session.busy is True

        with pytest.raises(SessionBusy):
            await session.submit("sad", self.context)

        outcome = await first
        assert outcome.theme == "space"
        assert session.busy is False

    async def test_suggest(self):
        backend = FakeBackend(error=RuntimeError("boom"))
        session = MoodSession(backend)

        assert await session.suggest("") == []
        assert backend.prompts == []
        assert await session.suggest("lonely") == ["love", "community", "sports"]

    async def test_initialize_backend(self):
        backend = FakeBackend(ready=False)
        session = MoodSession(backend)
        assert session.status().ready is False

        status = await session.initialize_backend()

        assert status.ready is True
        assert status.progress == "AI model ready!"
        assert status.busy is False

    async def test_no_backend_status(self):
        status = await MoodSession().initialize_backend()
        assert status.ready is False
        assert status.progress == ""

"""
Tests for the MoodChannel broadcast.

These tests verify that every mood, including the empty one, reaches every
subscriber.
"""

import asyncio

from moodblog.events import MoodChannel


class TestMoodChannel:
    """Test suite for MoodChannel functionality."""

    def setup_method(self):
        """Set up a fresh MoodChannel for each test."""
        self.channel = MoodChannel()

    async def test_initial_state(self):
        """A new channel starts with an empty mood."""
        event = await self.channel.read()
        assert event.prompt == ""
        assert event.timestamp is not None

    async def test_publish_and_read(self):
        published = await self.channel.publish("sad")
        assert published.prompt == "sad"

        latest = await self.channel.read()
        assert latest.prompt == "sad"
        assert latest.timestamp == published.timestamp

    async def test_broadcast_to_every_listener(self):
        """Two listeners both receive the latest mood, then each new one."""
        received = {"list": [], "detail": []}

        async def listener(name):
            async with self.channel.stream() as events:
                async for event in events:
                    received[name].append(event.prompt)
                    if len(received[name]) >= 3:
                        break

        tasks = [asyncio.create_task(listener(name)) for name in received]
        await asyncio.sleep(0.01)

        await self.channel.publish("lonely")
        await asyncio.sleep(0.01)
        await self.channel.publish("")

        try:
            await asyncio.wait_for(asyncio.gather(*tasks), timeout=2.0)
        except TimeoutError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            assert False, f"Test timed out. Got: {received}"

        assert received["list"] == ["", "lonely", ""]
        assert received["detail"] == ["", "lonely", ""]

    async def test_late_subscriber_starts_with_current_mood(self):
        """A subscriber joining after a submission sees it first, then the clear."""
        await self.channel.publish("bored")

        async with self.channel.stream() as events:
            assert (await anext(events)).prompt == "bored"

            async def next_event():
                return await anext(events)

            pending = asyncio.create_task(next_event())
            await asyncio.sleep(0.01)
            await self.channel.publish("")
            assert (await asyncio.wait_for(pending, timeout=2.0)).prompt == ""

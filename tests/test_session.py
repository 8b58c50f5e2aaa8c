"""
Tests for the SessionStore implementation.

These tests verify per-session mood updates, reads and streaming.
"""

import asyncio

import pytest

from youthmind.errors import EmptyEntry, TaskNotFound
from youthmind.session import SessionStore


class TestSessionStore:
    """Test suite for SessionStore functionality."""

    def setup_method(self):
        """Set up a fresh SessionStore for each test."""
        self.store = SessionStore()

    async def test_initial_state(self):
        """Test that a new session has no mood and empty transcripts."""
        assert await self.store.read_mood("s1") is None
        session = self.store.get("s1")
        assert session.chat == []
        assert session.voice == []
        assert self.store.get("s1") is session

    async def test_update_and_read(self):
        """Test mood update and retrieval."""
        updated = await self.store.update_mood("s1", "happy", "text", "en")

        assert updated.mood == "happy"
        assert updated.source == "text"
        assert updated.timestamp is not None

        read = await self.store.read_mood("s1")
        assert read == updated
        assert self.store.get("s1").get_mood() == updated

        second = await self.store.update_mood("s1", "sad")
        current = await self.store.read_mood("s1")
        assert current.mood == "sad"
        assert current.source == "manual"
        assert current.timestamp == second.timestamp

    async def test_sessions_are_isolated(self):
        await self.store.update_mood("a", "angry")

        assert await self.store.read_mood("b") is None

    async def test_streaming(self):
        """Test that two consumers of one session receive its updates."""
        consumer1_moods = []
        consumer2_moods = []
        other_session_moods = []

        await self.store.update_mood("s1", "neutral")

        async def consume(session_id, sink, count):
            async with self.store.stream(session_id) as mood_stream:
                async for mood in mood_stream:
                    sink.append(mood.mood)
                    if len(sink) >= count:
                        break

        task1 = asyncio.create_task(consume("s1", consumer1_moods, 3))
        task2 = asyncio.create_task(consume("s1", consumer2_moods, 3))
        other = asyncio.create_task(consume("s2", other_session_moods, 1))

        await asyncio.sleep(0.01)

        await self.store.update_mood("s1", "happy")
        await asyncio.sleep(0.01)
        await self.store.update_mood("s1", "sad")

        try:
            await asyncio.wait_for(asyncio.gather(task1, task2), timeout=2.0)
        except TimeoutError:
            task1.cancel()
            task2.cancel()
            await asyncio.gather(task1, task2, return_exceptions=True)
            assert False, f"Timed out: {consumer1_moods}, {consumer2_moods}"

        assert consumer1_moods == ["neutral", "happy", "sad"]
        assert consumer2_moods == ["neutral", "happy", "sad"]

        # The other session saw nothing.
        assert other_session_moods == []
        other.cancel()
        await asyncio.gather(other, return_exceptions=True)


class TestPersonalLists:
    def setup_method(self):
        self.store = SessionStore()

    def test_tasks_are_added_toggled_and_deleted(self):
        session = self.store.get("s1")

        first = session.add_task("Revise chapter 3")
        second = session.add_task("Call grandma")
        assert [t.id for t in session.todos] == [first.id, second.id]
        assert first.completed is False

        toggled = session.toggle_task(first.id)
        assert toggled.completed is True
        assert session.todos[0].completed is True
        assert session.toggle_task(first.id).completed is False

        session.delete_task(second.id)
        assert [t.text for t in session.todos] == ["Revise chapter 3"]

    def test_blank_task_is_rejected(self):
        session = self.store.get("s1")

        with pytest.raises(EmptyEntry):
            session.add_task("   ")

        assert session.todos == []

    def test_unknown_task_cannot_be_toggled(self):
        with pytest.raises(TaskNotFound):
            self.store.get("s1").toggle_task(42)

    def test_lists_are_per_session(self):
        self.store.get("a").add_task("mine")
        self.store.get("a").add_gratitude("sunshine")

        assert self.store.get("b").todos == []
        assert self.store.get("b").gratitude == []

    def test_gratitude_wall(self):
        session = self.store.get("s1")

        assert session.add_gratitude("A sunny morning") == ["A sunny morning"]
        assert session.add_gratitude("My friends") == ["A sunny morning", "My friends"]

        with pytest.raises(EmptyEntry):
            session.add_gratitude("")
        assert len(session.gratitude) == 2

"""
Per-session state for the YouthMind service.

Each session carries the last detected mood, the chat transcripts, a to-do
list and a gratitude wall for its lifetime in memory. The store also streams
mood updates to subscribers, which is how continuous mood sensing (periodic
face snapshots) reaches the client.
Nothing here is durable; a restart forgets every session.
"""

import asyncio
import itertools
import time
from collections.abc import AsyncGenerator, Iterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from .errors import EmptyEntry, TaskNotFound
from .models import ConversationTurn, MoodSignal, MoodSource, TodoTask


@dataclass
class SessionContext:
    """State for one session: its last mood, both transcripts and personal lists."""

    session_id: str
    chat: list[ConversationTurn] = field(default_factory=list)
    voice: list[ConversationTurn] = field(default_factory=list)
    todos: list[TodoTask] = field(default_factory=list)
    gratitude: list[str] = field(default_factory=list)
    _mood: MoodSignal | None = None
    _task_ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def get_mood(self) -> MoodSignal | None:
        return self._mood

    def set_mood(self, mood: MoodSignal) -> None:
        self._mood = mood

    # MARK: - To-do list

    def add_task(self, text: str) -> TodoTask:
        """
        Append a task to the to-do list.

        Raises:
            EmptyEntry: If ``text`` is blank
        """
        if not text.strip():
            raise EmptyEntry("Please enter a task before adding.")
        task = TodoTask(id=next(self._task_ids), text=text)
        self.todos.append(task)
        return task

    def toggle_task(self, task_id: int) -> TodoTask:
        """
        Flip a task between done and not done.

        Raises:
            TaskNotFound: If the session has no task with ``task_id``
        """
        for index, task in enumerate(self.todos):
            if task.id == task_id:
                toggled = task.model_copy(update={"completed": not task.completed})
                self.todos[index] = toggled
                return toggled
        raise TaskNotFound(f"No task with id {task_id}")

    def delete_task(self, task_id: int) -> None:
        self.todos = [task for task in self.todos if task.id != task_id]

    # MARK: - Gratitude wall

    def add_gratitude(self, entry: str) -> list[str]:
        """
        Post an entry to the gratitude wall and return the whole wall.

        Raises:
            EmptyEntry: If ``entry`` is blank
        """
        if not entry.strip():
            raise EmptyEntry("Please write something you are grateful for.")
        self.gratitude.append(entry)
        return list(self.gratitude)


class SessionStore:
    """
    In-memory session registry with real-time mood streaming.

    Sessions are created on first access. Mood updates bump a per-session
    counter and wake every subscriber waiting on the shared condition.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SessionContext] = {}
        self._condition = asyncio.Condition()
        self._update_counters: dict[str, int] = {}

    def get(self, session_id: str) -> SessionContext:
        """Return the session, creating it if it does not exist yet."""
        session = self._sessions.get(session_id)
        if session is None:
            session = SessionContext(session_id=session_id)
            self._sessions[session_id] = session
            self._update_counters[session_id] = 0
        return session

    async def update_mood(
        self,
        session_id: str,
        mood: str,
        source: MoodSource = "manual",
        language: str = "en",
    ) -> MoodSignal:
        """
        Record a new mood for a session and notify its subscribers.

        Args:
            session_id: The session to update
            mood: The mood tag
            source: What produced the mood
            language: The language the user was working in

        Returns:
            The stored MoodSignal with timestamp
        """
        async with self._condition:
            session = self.get(session_id)
            signal = MoodSignal(
                mood=mood, source=source, language=language, timestamp=time.time()
            )
            session.set_mood(signal)
            self._update_counters[session_id] += 1
            self._condition.notify_all()
            return signal

    async def read_mood(self, session_id: str) -> MoodSignal | None:
        async with self._condition:
            return self.get(session_id).get_mood()

    @asynccontextmanager
    async def stream(
        self, session_id: str
    ) -> AsyncGenerator[AsyncGenerator[MoodSignal, None], None]:
        """
        Stream mood updates for one session.

        The generator yields the current mood (if any) and then every update.

        Yields:
            An async generator of MoodSignal objects
        """

        async def mood_generator() -> AsyncGenerator[MoodSignal, None]:
            async with self._condition:
                session = self.get(session_id)
                last_seen_counter = self._update_counters[session_id]
                current = session.get_mood()
            if current is not None:
                yield current

            try:
                while True:
                    async with self._condition:
                        await self._condition.wait_for(
                            lambda: self._update_counters[session_id] > last_seen_counter
                        )
                        last_seen_counter = self._update_counters[session_id]
                        current = session.get_mood()
                    if current is not None:
                        yield current
            except (asyncio.CancelledError, GeneratorExit):
                return

        yield mood_generator()

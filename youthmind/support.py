"""
Peer support board.

Threads are appended to a document collection after both title and content
pass moderation, and listed newest first. The collection is in memory by
default and MongoDB when ``DATABASE_URL`` is configured.
"""

import asyncio
import itertools
import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, Protocol

from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from .errors import ModerationRejected, StoreError
from .models import NewThread, SupportThread
from .schemas import ModerationOutput

logger = logging.getLogger(__name__)

COLLECTION_NAME = "supportThreads"
ANONYMOUS_AUTHOR = "AnonymousUser"

MOOD_PROMPTS: dict[str, str] = {
    "happy": "Share your positive vibes! What's making you smile today?",
    "sad": "It's okay to feel down. Maybe you could talk about what's on your mind?",
    "anxious": "Feeling anxious is tough. How about starting a thread on coping with anxiety?",
    "stressed": "Stress is a common challenge. You could share your experience or ask for tips.",
    "angry": "Feeling angry? Venting can sometimes help. What's bothering you?",
    "calm": (
        "Feeling calm is wonderful. You could share your peace and what helps you stay centered."
    ),
}


def prompt_for_mood(mood: str | None) -> str | None:
    """Conversation starter for the support board, if one exists for ``mood``."""
    return MOOD_PROMPTS.get(mood.lower()) if mood else None


Moderator = Callable[[str], Awaitable[ModerationOutput]]


class ThreadCollection(Protocol):
    """Append-only document collection of thread records."""

    async def insert(self, document: dict[str, Any]) -> str: ...

    async def find_all_newest_first(self) -> list[dict[str, Any]]: ...

    def close(self) -> None: ...


# MARK: - Collections


class MemoryThreadCollection:
    """In-process thread collection; records with equal timestamps keep insertion order."""

    def __init__(self) -> None:
        self._documents: list[tuple[int, dict[str, Any]]] = []
        self._sequence = itertools.count()
        self.write_count = 0
        self.closed = False

    async def insert(self, document: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self._documents.append((next(self._sequence), {**document, "_id": doc_id}))
        self.write_count += 1
        return doc_id

    async def find_all_newest_first(self) -> list[dict[str, Any]]:
        ordered = sorted(
            self._documents, key=lambda item: (item[1]["createdAt"], item[0]), reverse=True
        )
        return [dict(document) for _, document in ordered]

    def close(self) -> None:
        self.closed = True


class MongoThreadCollection:
    """Thread collection backed by a MongoDB collection (blocking driver off the loop)."""

    def __init__(self, database_url: str, database_name: str) -> None:
        self._client: MongoClient = MongoClient(database_url, tz_aware=True)
        self._collection = self._client[database_name][COLLECTION_NAME]

    async def insert(self, document: dict[str, Any]) -> str:
        try:
            result = await asyncio.to_thread(self._collection.insert_one, dict(document))
        except PyMongoError as e:
            logger.error("Could not store support thread: %s", e)
            raise StoreError("Could not save the thread") from e
        return str(result.inserted_id)

    async def find_all_newest_first(self) -> list[dict[str, Any]]:
        def _find() -> list[dict[str, Any]]:
            return list(self._collection.find().sort("createdAt", DESCENDING))

        try:
            documents = await asyncio.to_thread(_find)
        except PyMongoError as e:
            logger.error("Could not load support threads: %s", e)
            raise StoreError("Could not load threads") from e
        for document in documents:
            document["_id"] = str(document["_id"])
        return documents

    def close(self) -> None:
        self._client.close()


# MARK: - Board


class SupportBoard:
    """
    Moderated create and newest-first listing of support threads.

    Args:
        collection: Where thread records are stored
        moderate: Async callable returning a safety verdict for a piece of text
    """

    def __init__(self, collection: ThreadCollection, moderate: Moderator) -> None:
        self.collection = collection
        self._moderate = moderate

    async def create_thread(self, new_thread: NewThread) -> SupportThread:
        """
        Moderate and store a new thread.

        Title and content are both checked before anything is written.

        Raises:
            ModerationRejected: If either the title or the content is flagged
        """
        title_verdict = await self._moderate(new_thread.title)
        if not title_verdict.is_safe:
            raise ModerationRejected(
                f"Title content flagged as unsafe: {title_verdict.reason}"
            )

        content_verdict = await self._moderate(new_thread.content)
        if not content_verdict.is_safe:
            raise ModerationRejected(
                f"Post content flagged as unsafe: {content_verdict.reason}"
            )

        document = {
            **new_thread.model_dump(),
            "author": ANONYMOUS_AUTHOR,
            "createdAt": datetime.now(timezone.utc),
            "likes": 0,
            "replies": 0,
        }
        thread_id = await self.collection.insert(document)
        logger.info("Created support thread %s", thread_id)
        return SupportThread.model_validate({**document, "id": thread_id})

    async def fetch_threads(self) -> list[SupportThread]:
        """Return every thread, newest first."""
        documents = await self.collection.find_all_newest_first()
        return [_to_thread(document) for document in documents]

    async def threads_for_mood(self, mood: str | None) -> list[SupportThread]:
        """Threads tagged with ``mood``, or all threads when none match or no mood is known."""
        threads = await self.fetch_threads()
        if not mood:
            return threads
        mood = mood.lower()
        matching = [
            thread for thread in threads if mood in {tag.lower() for tag in thread.tags}
        ]
        return matching or threads

    def close(self) -> None:
        self.collection.close()


def _to_thread(document: dict[str, Any]) -> SupportThread:
    return SupportThread(
        id=str(document["_id"]),
        title=document["title"],
        content=document["content"],
        author=document.get("author", ANONYMOUS_AUTHOR),
        tags=document.get("tags") or [],
        createdAt=document.get("createdAt") or datetime.now(timezone.utc),
        likes=document.get("likes", 0),
        replies=document.get("replies", 0),
    )

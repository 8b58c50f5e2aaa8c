"""
Shared data models for the YouthMind service.

This module defines the core domain models used across multiple layers
of the application (orchestration, support board, CLI, API).
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MoodSource = Literal["text", "image", "voice", "manual"]
Role = Literal["user", "model"]


class MoodSignal(BaseModel):
    """Represents a detected or self-reported mood."""

    model_config = ConfigDict(frozen=True)

    mood: str = Field(..., description="The mood tag, e.g. 'happy' or 'anxious'")
    source: MoodSource = Field("manual", description="Where the mood came from")
    language: str = Field("en", description="Language the user was working in")
    timestamp: float | None = Field(
        None, description="Unix timestamp when the mood was recorded"
    )


class ConversationTurn(BaseModel):
    """One message in a chat transcript."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Who said it")
    text: str = Field(..., description="What was said")


class NewThread(BaseModel):
    """Payload for starting a peer support thread."""

    title: str = Field(..., min_length=1, description="Thread title")
    content: str = Field(..., min_length=1, description="Thread body")
    tags: list[str] = Field(default_factory=list, description="Mood or topic tags")


class SupportThread(BaseModel):
    """A stored peer support thread."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    content: str
    author: str
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(..., alias="createdAt")
    likes: int = 0
    replies: int = 0


class Helpline(BaseModel):
    name: str
    number: str


class CrisisResources(BaseModel):
    """Static content of the safety resource dialog."""

    title: str
    message: str
    helplines: list[Helpline]
    emergency_note: str


class TodoTask(BaseModel):
    """One item on a session's to-do list."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Session-unique task number")
    text: str = Field(..., description="What needs doing")
    completed: bool = Field(False, description="Whether it has been ticked off")

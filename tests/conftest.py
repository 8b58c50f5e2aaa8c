"""
Shared test doubles for the YouthMind tests.

The generative service is always faked: tests script what each flow returns
and inspect what was sent.
"""

import copy
from collections.abc import Sequence
from typing import Any

import pytest

from youthmind.models import ConversationTurn
from youthmind.orchestrator import SessionOrchestrator
from youthmind.session import SessionStore
from youthmind.flows import moderate_text
from youthmind.support import MemoryThreadCollection, SupportBoard

# 4 frames of 16-bit mono silence
SILENCE_PCM = b"\x00\x00" * 4

ROADMAP = {
    "roadmapId": "rm-1",
    "generatedAt": "2026-01-01T00:00:00Z",
    "tracks": [
        {
            "id": "web-dev",
            "name": "Web Developer",
            "confidence": 0.9,
            "skillsTargeted": ["html", "css"],
            "durationMonths": 6,
            "steps": [
                {
                    "id": "html-css",
                    "title": "Learn HTML & CSS basics",
                    "durationWeeks": 4,
                    "resources": ["MDN"],
                    "microActions": ["Build 3 static pages"],
                    "dependencies": [],
                }
            ],
            "careerOutcomes": ["Frontend developer"],
        }
    ],
    "flowchart": {
        "nodes": [
            {"id": "start", "position": {"x": 0, "y": 0}, "data": {"label": "Start"}, "type": "input"},
            {"id": "html-css", "position": {"x": 200, "y": 0}, "data": {"label": "HTML & CSS"}},
        ],
        "edges": [{"id": "e1", "source": "start", "target": "html-css", "animated": True}],
    },
    "explanation": "You like building things.",
}

DEFAULT_RESPONSES: dict[str, Any] = {
    "detectMoodAndRespond": {"mood": "anxious", "response": "That sounds hard."},
    "detectMoodFromImage": {"mood": "happy"},
    "counselorChat": {"response": "Tell me more about that."},
    "journalingPrompt": {"prompt": "Write about a place you feel safe."},
    "musicRecommendation": {"recommendation": "Try some lo-fi beats."},
    "personalizedRecommendation": {"recommendation": "Take three slow breaths."},
    "gameSuggestion": {
        "gameId": "breathing",
        "title": "Breathe with me",
        "description": "A slow breathing exercise to settle your nerves.",
    },
    "moodArt": {
        "imageUrl": "https://images.unsplash.com/photo-1518837695005-2083093ee35b",
        "altText": "A calm forest path",
    },
    "moderateText": {"isSafe": True},
    "analyzeVoice": {"userTranscript": "I had a long day", "detectedTone": "somber"},
    "voiceReply": {"response": "Long days can be draining."},
}


class FakeModelClient:
    """Scripted stand-in for ``GenerativeClient`` that records every call."""

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        speech: bytes | None = SILENCE_PCM,
        image: str | None = "data:image/png;base64,iVBORw0KGgo=",
    ) -> None:
        self.responses = {**DEFAULT_RESPONSES, **(responses or {})}
        self.speech = speech
        self.image = image
        self.calls: list[dict[str, Any]] = []
        self.speech_calls: list[str] = []
        self.image_calls: list[str] = []

    async def generate_json(
        self,
        prompt: str,
        *,
        schema: dict[str, Any],
        media: str | None = None,
        history: Sequence[ConversationTurn] = (),
        label: str = "flow",
    ) -> Any:
        self.calls.append(
            {
                "label": label,
                "prompt": prompt,
                "schema": schema,
                "media": media,
                "history": list(history),
            }
        )
        value = self.responses.get(label)
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(prompt)
        return copy.deepcopy(value)

    async def synthesize_speech(self, text: str) -> bytes | None:
        self.speech_calls.append(text)
        return self.speech

    async def generate_image(self, prompt: str) -> str | None:
        self.image_calls.append(prompt)
        return self.image

    def labels(self) -> list[str]:
        return [call["label"] for call in self.calls]


class FakeModels:
    """Stands in for ``genai.Client(...).aio.models``; records every call."""

    def __init__(self, reply: Any = None) -> None:
        self.reply = reply
        self.calls: list[dict[str, Any]] = []

    async def _answer(self, kwargs: dict[str, Any]) -> Any:
        self.calls.append(kwargs)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply

    async def generate_content(self, **kwargs: Any) -> Any:
        return await self._answer(kwargs)

    async def generate_images(self, **kwargs: Any) -> Any:
        return await self._answer(kwargs)


@pytest.fixture
def fake_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def collection() -> MemoryThreadCollection:
    return MemoryThreadCollection()


@pytest.fixture
def orchestrator(
    fake_client: FakeModelClient, collection: MemoryThreadCollection
) -> SessionOrchestrator:
    board = SupportBoard(collection, lambda text: moderate_text(fake_client, text))
    return SessionOrchestrator(fake_client, SessionStore(), board)

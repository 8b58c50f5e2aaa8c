"""
Session orchestrator.

Ties the flows together for one user session: screens free text with the
crisis keyword gate, sequences the model calls, keeps the session's mood and
transcripts up to date and hands structured results back to the caller.
"""

import logging
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

from . import flows
from .errors import FlowError, MoodRequired
from .flows import ModelClient, run_flow
from .models import ConversationTurn, CrisisResources, NewThread, SupportThread
from .roadmap import flowchart_issues
from .safety import CRISIS_RESOURCES, is_crisis
from .schemas import (
    CounselorChatInput,
    FacialMoodInput,
    ImageResult,
    MoodArtInput,
    MoodDetectionInput,
    MoodInput,
    RoadmapInput,
    RoadmapOutput,
    VoiceTurnResult,
    WireModel,
)
from .session import SessionStore
from .support import SupportBoard
from .voice import voice_turn

logger = logging.getLogger(__name__)

RecommendationKind = Literal["journaling-prompt", "music", "game", "art", "personalized"]

_MOOD_FLOWS = {
    "journaling-prompt": flows.JOURNALING_PROMPT,
    "music": flows.MUSIC_RECOMMENDATION,
    "game": flows.GAME_SUGGESTION,
    "personalized": flows.PERSONALIZED_RECOMMENDATION,
}

ResultT = TypeVar("ResultT", bound=BaseModel)


@dataclass(frozen=True)
class Outcome(Generic[ResultT]):
    """Either a result, or a crisis short-circuit carrying the safety resources."""

    result: ResultT | None = None
    crisis: bool = False
    resources: CrisisResources | None = None

    @classmethod
    def crisis_detected(cls) -> "Outcome[ResultT]":
        return cls(crisis=True, resources=CRISIS_RESOURCES)


class CheckInResult(WireModel):
    mood: str
    response: str
    recommendation: str | None = None


class ChatReply(WireModel):
    response: str
    history: list[ConversationTurn]


class SessionOrchestrator:
    """
    Coordinates model calls for sessions held in a ``SessionStore``.

    Args:
        client: The generative service client
        sessions: Where session moods and transcripts live
        support: The moderated peer support board
    """

    def __init__(
        self, client: ModelClient, sessions: SessionStore, support: SupportBoard
    ) -> None:
        self.client = client
        self.sessions = sessions
        self.support = support

    # MARK: - Mood

    async def check_in(
        self, session_id: str, text: str, language: str = "en"
    ) -> Outcome[CheckInResult]:
        """
        Detect mood from free text, reply to it, and follow up with a recommendation.

        Crisis text never reaches the model.
        """
        if is_crisis(text):
            return Outcome.crisis_detected()

        detected = await run_flow(
            self.client,
            flows.DETECT_MOOD_AND_RESPOND,
            MoodDetectionInput(text=text, language=language),
        )
        await self.sessions.update_mood(session_id, detected.mood, "text", language)

        recommendation = None
        if detected.mood:
            # A failed follow-up only drops the recommendation.
            try:
                recs = await run_flow(
                    self.client,
                    flows.PERSONALIZED_RECOMMENDATION,
                    MoodInput(mood=detected.mood, language=language),
                )
                recommendation = recs.recommendation
            except FlowError as e:
                logger.warning("Recommendation after check-in failed: %s", e)

        return Outcome(
            result=CheckInResult(
                mood=detected.mood, response=detected.response, recommendation=recommendation
            )
        )

    async def detect_face(
        self, session_id: str, image_data_uri: str, language: str = "en"
    ) -> str:
        """Detect mood from a camera snapshot and store it for the session."""
        detected = await run_flow(
            self.client,
            flows.DETECT_MOOD_FROM_IMAGE,
            FacialMoodInput(image_data_uri=image_data_uri),
        )
        await self.sessions.update_mood(session_id, detected.mood, "image", language)
        return detected.mood

    # MARK: - Counselling

    async def chat(
        self, session_id: str, text: str, language: str = "en"
    ) -> Outcome[ChatReply]:
        """
        Send one message to the counselor.

        The user's turn is added before the call and taken back out if the
        call fails, so the transcript only ever holds answered messages.
        """
        if is_crisis(text):
            return Outcome.crisis_detected()

        session = self.sessions.get(session_id)
        prior = list(session.chat)
        user_turn = ConversationTurn(role="user", text=text)
        session.chat.append(user_turn)

        try:
            reply = await run_flow(
                self.client,
                flows.COUNSELOR_CHAT,
                CounselorChatInput(text=text, language=language, history=prior),
            )
        except Exception:
            _remove_turn(session.chat, user_turn)
            raise

        session.chat.append(ConversationTurn(role="model", text=reply.response))
        return Outcome(result=ChatReply(response=reply.response, history=list(session.chat)))

    async def voice(
        self, session_id: str, audio_data_uri: str, language: str = "en"
    ) -> VoiceTurnResult:
        """Run one spoken turn; the voice transcript only grows when the whole turn succeeds."""
        session = self.sessions.get(session_id)
        result = await voice_turn(self.client, audio_data_uri, language, list(session.voice))
        session.voice.extend(
            [
                ConversationTurn(role="user", text=result.user_transcript),
                ConversationTurn(role="model", text=result.response_text),
            ]
        )
        await self.sessions.update_mood(session_id, result.detected_tone, "voice", language)
        return result

    # MARK: - Recommendations

    async def recommend(
        self,
        session_id: str,
        kind: RecommendationKind,
        language: str = "en",
        mood: str | None = None,
        prompt: str | None = None,
    ) -> Outcome[BaseModel]:
        """
        Produce a mood-keyed recommendation.

        Uses ``mood`` when given (and records it as a manual mood), otherwise
        the session's last detected mood.

        Raises:
            MoodRequired: If no mood is known for the session
        """
        if mood:
            await self.sessions.update_mood(session_id, mood, "manual", language)
        else:
            signal = await self.sessions.read_mood(session_id)
            if signal is None:
                raise MoodRequired("No mood detected yet for this session")
            mood = signal.mood

        if kind == "art":
            return await self._mood_art(mood, prompt or "", language)

        flow = _MOOD_FLOWS[kind]
        result = await run_flow(self.client, flow, MoodInput(mood=mood, language=language))
        return Outcome(result=result)

    async def _mood_art(self, mood: str, prompt: str, language: str) -> Outcome[BaseModel]:
        if is_crisis(prompt):
            return Outcome.crisis_detected()
        result: ImageResult = await run_flow(
            self.client,
            flows.MOOD_ART,
            MoodArtInput(mood=mood, prompt=prompt, language=language),
        )
        return Outcome(result=result)

    # MARK: - Roadmap

    async def roadmap(self, request: RoadmapInput) -> RoadmapOutput:
        """Generate a career roadmap and log anything wrong with its flowchart."""
        output = await run_flow(self.client, flows.CAREER_ROADMAP, request)
        for issue in flowchart_issues(output.flowchart):
            logger.warning("Roadmap %s flowchart: %s", output.roadmap_id, issue)
        return output

    # MARK: - Support board

    async def create_thread(self, new_thread: NewThread) -> SupportThread:
        return await self.support.create_thread(new_thread)

    async def threads(self, session_id: str | None = None) -> list[SupportThread]:
        """All threads, or those matching the session's mood when a session is given."""
        if session_id is None:
            return await self.support.fetch_threads()
        signal = await self.sessions.read_mood(session_id)
        return await self.support.threads_for_mood(signal.mood if signal else None)


def _remove_turn(transcript: list[ConversationTurn], turn: ConversationTurn) -> None:
    for index in range(len(transcript) - 1, -1, -1):
        if transcript[index] is turn:
            del transcript[index]
            return

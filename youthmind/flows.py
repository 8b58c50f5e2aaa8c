"""
Flow descriptors and the generic invocation function.

A flow is one structured exchange with the generative model: validate the
input, render the prompt, call the model with the output schema, validate
what comes back. Every feature is a ``Flow`` value interpreted by
``run_flow``; prompts stay inspectable configuration rather than code.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from . import prompts
from .errors import FlowError, FlowInputError, FlowOutputError, NoOutputError
from .models import ConversationTurn
from .schemas import (
    CounselorChatInput,
    CounselorChatOutput,
    FacialMoodInput,
    FacialMoodOutput,
    FeatureImageInput,
    GameSuggestionOutput,
    ImageResult,
    JournalingPromptOutput,
    ModerationInput,
    ModerationOutput,
    MoodArtInput,
    MoodDetectionInput,
    MoodDetectionOutput,
    MoodInput,
    MusicRecommendationOutput,
    PersonalizedRecommendationOutput,
    RoadmapInput,
    RoadmapOutput,
    VoiceAnalysisInput,
    VoiceAnalysisOutput,
    VoiceReplyInput,
)

logger = logging.getLogger(__name__)

InT = TypeVar("InT", bound=BaseModel)
OutT = TypeVar("OutT", bound=BaseModel)


class ModelClient(Protocol):
    """What a flow needs from the generative service."""

    async def generate_json(
        self,
        prompt: str,
        *,
        schema: dict[str, Any],
        media: str | None = None,
        history: Sequence[ConversationTurn] = (),
        label: str = "flow",
    ) -> Any: ...

    async def synthesize_speech(self, text: str) -> bytes | None: ...

    async def generate_image(self, prompt: str) -> str | None: ...


@dataclass(frozen=True)
class Flow(Generic[InT, OutT]):
    """Declarative description of one model exchange."""

    name: str
    input_model: type[InT]
    output_model: type[OutT]
    prompt: str
    media_field: str | None = None
    history_field: str | None = None
    finalize: Callable[[OutT], OutT] | None = None

    def render(self, request: InT) -> str:
        skip = {self.media_field, self.history_field}
        values = {
            name: _render_value(getattr(request, name))
            for name in type(request).model_fields
            if name not in skip
        }
        return self.prompt.format_map(_Blank(values))


class _Blank(dict):
    def __missing__(self, key: str) -> str:
        return ""


def _render_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


async def run_flow(
    client: ModelClient, flow: Flow[InT, OutT], payload: InT | Mapping[str, Any]
) -> OutT:
    """
    Run one flow against the generative model.

    Args:
        client: The generative service client
        flow: The flow descriptor
        payload: A validated input model or a mapping to validate

    Returns:
        The validated output model

    Raises:
        FlowInputError: If ``payload`` does not match the input schema
        NoOutputError: If the model returned no output
        FlowOutputError: If the output does not match the output schema
    """
    try:
        request = (
            payload
            if isinstance(payload, flow.input_model)
            else flow.input_model.model_validate(payload)
        )
    except ValidationError as e:
        raise FlowInputError(f"Invalid input for {flow.name}: {e}") from e

    media = getattr(request, flow.media_field) if flow.media_field else None
    history = getattr(request, flow.history_field) if flow.history_field else ()

    raw = await client.generate_json(
        flow.render(request),
        schema=flow.output_model.model_json_schema(),
        media=media,
        history=history,
        label=flow.name,
    )
    if not raw:
        raise NoOutputError(f"{flow.name} returned no output")

    try:
        output = flow.output_model.model_validate(raw)
    except ValidationError as e:
        logger.warning("%s output failed validation: %s", flow.name, e)
        raise FlowOutputError(f"{flow.name} returned output that does not match its schema") from e

    if flow.finalize is not None:
        output = flow.finalize(output)
    return output


# MARK: - Finalizers


def _stamp_generated_at(output: RoadmapOutput) -> RoadmapOutput:
    if output.generated_at:
        return output
    now = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return output.model_copy(update={"generated_at": now})


# MARK: - Catalogue

DETECT_MOOD_AND_RESPOND = Flow(
    "detectMoodAndRespond", MoodDetectionInput, MoodDetectionOutput, prompts.MOOD_DETECTION
)

DETECT_MOOD_FROM_IMAGE = Flow(
    "detectMoodFromImage",
    FacialMoodInput,
    FacialMoodOutput,
    prompts.FACIAL_MOOD,
    media_field="image_data_uri",
)

COUNSELOR_CHAT = Flow(
    "counselorChat",
    CounselorChatInput,
    CounselorChatOutput,
    prompts.COUNSELOR_CHAT,
    history_field="history",
)

JOURNALING_PROMPT = Flow(
    "journalingPrompt", MoodInput, JournalingPromptOutput, prompts.JOURNALING_PROMPT
)

MUSIC_RECOMMENDATION = Flow(
    "musicRecommendation", MoodInput, MusicRecommendationOutput, prompts.MUSIC_RECOMMENDATION
)

PERSONALIZED_RECOMMENDATION = Flow(
    "personalizedRecommendation",
    MoodInput,
    PersonalizedRecommendationOutput,
    prompts.PERSONALIZED_RECOMMENDATION,
)

GAME_SUGGESTION = Flow("gameSuggestion", MoodInput, GameSuggestionOutput, prompts.GAME_SUGGESTION)

MOOD_ART = Flow("moodArt", MoodArtInput, ImageResult, prompts.MOOD_ART)

CAREER_ROADMAP = Flow(
    "careerRoadmap",
    RoadmapInput,
    RoadmapOutput,
    prompts.CAREER_ROADMAP,
    finalize=_stamp_generated_at,
)

MODERATE_TEXT = Flow("moderateText", ModerationInput, ModerationOutput, prompts.MODERATION)

ANALYZE_VOICE = Flow(
    "analyzeVoice",
    VoiceAnalysisInput,
    VoiceAnalysisOutput,
    prompts.VOICE_ANALYSIS,
    media_field="audio_data_uri",
)

VOICE_REPLY = Flow(
    "voiceReply",
    VoiceReplyInput,
    CounselorChatOutput,
    prompts.VOICE_REPLY,
    history_field="history",
)


# MARK: - Special cases


async def moderate_text(client: ModelClient, text: str) -> ModerationOutput:
    """
    Classify ``text`` as safe or unsafe.

    An empty model answer counts as unsafe.
    """
    try:
        return await run_flow(client, MODERATE_TEXT, {"text": text})
    except NoOutputError:
        logger.warning("Moderation returned no verdict; treating text as unsafe")
        return ModerationOutput(is_safe=False, reason="Analysis failed.")


async def generate_feature_image(
    client: ModelClient, feature_title: str, feature_description: str
) -> ImageResult:
    """Generate an illustration for an app feature."""
    request = FeatureImageInput(
        feature_title=feature_title, feature_description=feature_description
    )
    image = await client.generate_image(
        prompts.FEATURE_IMAGE.format(
            feature_title=request.feature_title,
            feature_description=request.feature_description,
        )
    )
    if not image:
        raise FlowError("Image generation failed. The model did not return an image.")
    return ImageResult(image_url=image, alt_text=f"Illustration for {request.feature_title}")

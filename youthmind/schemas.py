"""
Input and output schemas for every flow.

The field descriptions are part of the contract with the model: they are sent
with the JSON schema of each output. Wire names are camelCase, Python
attributes snake_case.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import ConversationTurn

GameId = Literal["breathing", "gratitude", "shooter", "balloon", "reaction", "memory"]


class WireModel(BaseModel):
    """Base for flow payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# MARK: - Mood


class MoodDetectionInput(WireModel):
    text: str = Field(..., description="The user input text.")
    language: str | None = Field(None, description="The user selected language.")


class MoodDetectionOutput(WireModel):
    mood: str = Field(..., description="The detected mood of the user.")
    response: str = Field(..., description="An empathetic and supportive response.")


class FacialMoodInput(WireModel):
    image_data_uri: str = Field(
        ...,
        description=(
            "A photo of a person's face, as a data URI that must include a MIME type "
            "and use Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        ),
    )


class FacialMoodOutput(WireModel):
    mood: str = Field(
        ...,
        description=(
            "The detected mood of the user. One of: happy, sad, angry, fear, disgust, "
            "neutral, surprise."
        ),
    )


# MARK: - Counselor


class CounselorChatInput(WireModel):
    text: str = Field(..., description="The user input text.")
    language: str | None = Field(None, description="The user selected language.")
    history: list[ConversationTurn] = Field(
        default_factory=list, description="The conversation history."
    )


class CounselorChatOutput(WireModel):
    response: str = Field(
        ..., description="An empathetic and supportive response from the AI counselor."
    )


# MARK: - Recommendations


class MoodInput(WireModel):
    """Input shared by the mood-keyed recommendation flows."""

    mood: str = Field(..., description="The current mood of the user.")
    language: str | None = Field(None, description="The language to respond in.")


class JournalingPromptOutput(WireModel):
    prompt: str = Field(..., description="A creative journaling prompt.")


class MusicRecommendationOutput(WireModel):
    recommendation: str = Field(
        ...,
        description=(
            "A music recommendation for the user based on their mood, including genre or style."
        ),
    )


class PersonalizedRecommendationOutput(WireModel):
    recommendation: str = Field(
        ..., description="A personalized recommendation for the user based on their mood."
    )


class GameSuggestionOutput(WireModel):
    game_id: GameId = Field(..., description="The ID of the suggested game.")
    title: str = Field(..., description="The title of the suggested game.")
    description: str = Field(
        ...,
        description="A brief, encouraging description of the game and why it might help.",
    )


class MoodArtInput(WireModel):
    mood: str = Field(..., description="The user's current mood.")
    prompt: str = Field(
        ...,
        description=(
            "A descriptive prompt from the user about their feelings or what they want to see."
        ),
    )
    language: str | None = Field(None, description="The language of the prompt.")


class ImageResult(WireModel):
    image_url: str = Field(..., description="The URL of the image.")
    alt_text: str = Field(..., description="A descriptive alt text for the image.")

    @field_validator("image_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not value.startswith(("https://", "http://", "data:image/")):
            raise ValueError("image_url must be an http(s) URL or an image data URI")
        return value


class FeatureImageInput(WireModel):
    feature_title: str = Field(..., description="The title of the feature.")
    feature_description: str = Field(
        ..., description="A description of the feature for which to generate an image."
    )


# MARK: - Career roadmap


class RoadmapInput(WireModel):
    interests: list[str] = Field(..., description="A list of the student's interests.")
    skills: list[str] = Field(..., description="A list of the student's current skills.")
    avoid: list[str] = Field(
        default_factory=list, description="A list of things the student wants to avoid."
    )


class RoadmapStep(WireModel):
    id: str = Field(..., description='A unique ID for this step (e.g., "html-css").')
    title: str = Field(..., description="The title of the roadmap step.")
    duration_weeks: float = Field(
        ..., description="The estimated duration of this step in weeks."
    )
    resources: list[str] = Field(..., description="Suggested learning resources.")
    micro_actions: list[str] = Field(
        ..., description="Small, concrete actions for the student to take."
    )
    dependencies: list[str] | None = Field(
        None, description="Step IDs that must be completed before this one."
    )


class CareerTrack(WireModel):
    id: str = Field(..., description='A unique ID for this career track (e.g., "web-dev").')
    name: str = Field(..., description="The name of the career track.")
    confidence: float = Field(
        ..., description="Confidence that this track is a good fit, from 0.0 to 1.0."
    )
    skills_targeted: list[str] = Field(
        ..., description="Key skills that will be developed in this track."
    )
    duration_months: float = Field(
        ..., description="The estimated total duration of this track in months."
    )
    steps: list[RoadmapStep] = Field(..., description="The steps in this career track.")
    career_outcomes: list[str] = Field(
        ..., description="Potential job titles or outcomes after completing the track."
    )


class Position(WireModel):
    x: float
    y: float


class NodeData(WireModel):
    label: str


class FlowNode(WireModel):
    id: str
    position: Position
    data: NodeData
    type: Literal["input", "output", "default"] | None = None


class FlowEdge(WireModel):
    id: str
    source: str
    target: str
    animated: bool | None = None


class Flowchart(WireModel):
    nodes: list[FlowNode]
    edges: list[FlowEdge]


class RoadmapOutput(WireModel):
    roadmap_id: str = Field(..., description="A unique ID for the entire roadmap.")
    generated_at: str = Field(
        "", description="The ISO 8601 timestamp of when the roadmap was generated."
    )
    tracks: list[CareerTrack] = Field(
        ..., description="An array of 2-3 recommended career tracks."
    )
    flowchart: Flowchart = Field(
        ...,
        description=(
            "A flowchart of the highest-confidence career track, compatible with React Flow."
        ),
    )
    explanation: str = Field(
        ...,
        description="A plain-language justification for why this roadmap fits the student.",
    )


# MARK: - Moderation


class ModerationInput(WireModel):
    text: str = Field(..., description="The text content to be moderated.")


class ModerationOutput(WireModel):
    is_safe: bool = Field(..., description="Whether the text is considered safe or not.")
    reason: str | None = Field(
        None, description="The reason why the text was flagged, if it was not safe."
    )


# MARK: - Voice


class VoiceAnalysisInput(WireModel):
    audio_data_uri: str = Field(
        ...,
        description=(
            "A data URI of the user's voice recording. Expected format: "
            "'data:audio/<format>;base64,<encoded_data>'."
        ),
    )


class VoiceAnalysisOutput(WireModel):
    user_transcript: str = Field(
        ..., description="The exact transcription of the user's speech."
    )
    detected_tone: str = Field(
        ..., description="The detected emotional tone of the speaker's voice."
    )


class VoiceReplyInput(WireModel):
    user_transcript: str
    detected_tone: str
    language: str | None = None
    history: list[ConversationTurn] = Field(default_factory=list)


class VoiceTurnResult(WireModel):
    response_text: str = Field(
        ..., description="An empathetic and supportive response from the AI counselor."
    )
    response_audio_data_uri: str = Field(
        ..., description="A data URI of the AI counselor's voice response."
    )
    user_transcript: str = Field(..., description="The transcript of the user's speech.")
    detected_tone: str = Field(
        ..., description="The detected emotional tone from the user's voice."
    )

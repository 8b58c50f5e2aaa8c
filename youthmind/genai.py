"""
Client for the hosted generative AI service (Gemini), via the google-genai SDK.

The service is a black box: it takes a prompt (plus optional media and prior
turns) and an output schema, and returns JSON text, speech audio or an image.
No timeout, retry or backoff is applied locally.
"""

import json
import logging
import re
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import httpx
from google import genai
from google.genai import errors, types

from .config import Settings
from .errors import FlowOutputError, GenerationError
from .media import parse_data_uri, to_data_uri
from .models import ConversationTurn

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def strip_json_fences(text: str) -> str:
    """Strip markdown code fences the model sometimes wraps around JSON."""
    text = text.strip()
    match = _JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def _media_part(data_uri: str) -> types.Part:
    mime, data = parse_data_uri(data_uri)
    return types.Part.from_bytes(data=data, mime_type=mime)


def _history_contents(history: Sequence[ConversationTurn]) -> list[types.Content]:
    return [
        types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)])
        for turn in history
    ]


@contextmanager
def _service_call(label: str) -> Iterator[None]:
    """Translate SDK and transport failures into flow errors."""
    try:
        yield
    except errors.APIError as e:
        logger.warning("Generative service returned %s for %s: %s", e.code, label, e.message)
        raise GenerationError(
            f"Generative service failed (HTTP {e.code}, label={label})", status_code=e.code
        ) from e
    except httpx.HTTPError as e:
        logger.warning("Generative service unreachable for %s: %s", label, e)
        raise GenerationError(f"Generative service unreachable (label={label})") from e
    except ValueError as e:
        logger.warning("Unreadable response from generative service for %s: %s", label, e)
        raise FlowOutputError(f"{label} returned an unreadable response") from e


class GenerativeClient:
    """
    Async wrapper around ``genai.Client(...).aio.models``.

    The SDK client is created on first use. Pass ``models`` to supply the
    models surface directly (tests script it with a fake).
    """

    def __init__(self, settings: Settings, models: Any | None = None) -> None:
        self._settings = settings
        self._client: genai.Client | None = None
        self._models = models

    def _get_models(self) -> Any:
        if self._models is None:
            http_options = (
                types.HttpOptions(base_url=self._settings.gemini_base_url)
                if self._settings.gemini_base_url
                else None
            )
            self._client = genai.Client(
                api_key=self._settings.api_key, http_options=http_options
            )
            self._models = self._client.aio.models
        return self._models

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aio.aclose()

    # MARK: - Public API

    async def generate_json(
        self,
        prompt: str,
        *,
        schema: dict[str, Any],
        media: str | None = None,
        history: Sequence[ConversationTurn] = (),
        label: str = "flow",
    ) -> Any:
        """
        Ask the text model for JSON matching ``schema``.

        Args:
            prompt: Rendered instruction text
            schema: JSON schema of the expected output
            media: Optional data URI (image or audio) sent alongside the prompt
            history: Prior conversation turns, oldest first
            label: Name used in log lines

        Returns:
            The decoded JSON value, or None when the model returned no text

        Raises:
            GenerationError: If the service failed or could not be reached
            FlowOutputError: If the returned text is not valid JSON
        """
        parts: list[types.Part] = []
        if media:
            parts.append(_media_part(media))
        parts.append(types.Part.from_text(text=prompt))
        contents = [*_history_contents(history), types.Content(role="user", parts=parts)]

        logger.debug("Calling %s for %s", self._settings.text_model, label)
        with _service_call(label):
            response = await self._get_models().generate_content(
                model=self._settings.text_model,
                contents=contents,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_json_schema=schema,
                ),
            )

        text = (response.text or "").strip()
        if not text:
            return None
        try:
            return json.loads(strip_json_fences(text))
        except json.JSONDecodeError as e:
            raise FlowOutputError(f"{label} returned malformed JSON: {e}") from e

    async def synthesize_speech(self, text: str) -> bytes | None:
        """Return raw 16-bit mono PCM speech for ``text``, or None if no audio came back."""
        with _service_call("tts"):
            response = await self._get_models().generate_content(
                model=self._settings.tts_model,
                contents=text,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(
                                voice_name=self._settings.tts_voice
                            )
                        )
                    ),
                ),
            )

        for part in _candidate_parts(response):
            if part.inline_data is not None and part.inline_data.data:
                return part.inline_data.data
        return None

    async def generate_image(self, prompt: str) -> str | None:
        """Return a generated image as a data URI, or None if the model produced none."""
        with _service_call("image"):
            response = await self._get_models().generate_images(
                model=self._settings.image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(number_of_images=1),
            )

        for generated in response.generated_images or []:
            image = generated.image
            if image is not None and image.image_bytes:
                return to_data_uri(image.mime_type or "image/png", image.image_bytes)
        return None


def _candidate_parts(response: types.GenerateContentResponse) -> list[types.Part]:
    if not response.candidates:
        return []
    content = response.candidates[0].content
    if content is None:
        return []
    return content.parts or []

"""
Voice counselling turn.

Three sequential model calls with nothing shared between them: transcribe and
classify tone, write a reply, synthesize the reply as speech. Any failing
stage aborts the turn.
"""

import logging
from collections.abc import Sequence

from .errors import FlowOutputError, MediaError, NoOutputError
from .flows import ANALYZE_VOICE, VOICE_REPLY, ModelClient, run_flow
from .media import pcm_to_wav, to_data_uri
from .models import ConversationTurn
from .schemas import VoiceAnalysisInput, VoiceReplyInput, VoiceTurnResult

logger = logging.getLogger(__name__)


async def voice_turn(
    client: ModelClient,
    audio_data_uri: str,
    language: str | None = None,
    history: Sequence[ConversationTurn] = (),
) -> VoiceTurnResult:
    """
    Run one spoken exchange.

    Args:
        client: The generative service client
        audio_data_uri: The user's recording as a data URI
        language: Language to reply in
        history: Prior voice turns, oldest first

    Returns:
        Transcript, detected tone, reply text and reply audio (WAV data URI)
    """
    analysis = await run_flow(
        client, ANALYZE_VOICE, VoiceAnalysisInput(audio_data_uri=audio_data_uri)
    )
    logger.debug("Voice tone detected: %s", analysis.detected_tone)

    reply = await run_flow(
        client,
        VOICE_REPLY,
        VoiceReplyInput(
            user_transcript=analysis.user_transcript,
            detected_tone=analysis.detected_tone,
            language=language,
            history=list(history),
        ),
    )

    pcm = await client.synthesize_speech(reply.response)
    if not pcm:
        raise NoOutputError("no media returned from TTS model")

    try:
        wav = pcm_to_wav(pcm)
    except MediaError as e:
        raise FlowOutputError(f"TTS model returned unusable audio: {e}") from e

    return VoiceTurnResult(
        response_text=reply.response,
        response_audio_data_uri=to_data_uri("audio/wav", wav),
        user_transcript=analysis.user_transcript,
        detected_tone=analysis.detected_tone,
    )

"""
Tests for the three-stage voice turn.
"""

import pytest

from youthmind.errors import FlowError, FlowOutputError, NoOutputError
from youthmind.media import WAV_HEADER_SIZE, parse_data_uri
from youthmind.models import ConversationTurn
from youthmind.voice import voice_turn

from conftest import SILENCE_PCM, FakeModelClient

AUDIO = "data:audio/webm;base64,aGVsbG8="


class TestVoiceTurn:
    async def test_stages_run_in_order(self):
        client = FakeModelClient()
        history = [ConversationTurn(role="user", text="earlier")]

        result = await voice_turn(client, AUDIO, "en", history)

        assert client.labels() == ["analyzeVoice", "voiceReply"]
        assert client.calls[0]["media"] == AUDIO
        assert client.calls[1]["history"] == history
        assert "I had a long day" in client.calls[1]["prompt"]
        assert "somber" in client.calls[1]["prompt"]
        assert client.speech_calls == ["Long days can be draining."]

        assert result.user_transcript == "I had a long day"
        assert result.detected_tone == "somber"
        assert result.response_text == "Long days can be draining."

    async def test_reply_audio_is_wav(self):
        client = FakeModelClient()

        result = await voice_turn(client, AUDIO)

        mime, wav = parse_data_uri(result.response_audio_data_uri)
        assert mime == "audio/wav"
        assert wav[:4] == b"RIFF"
        assert len(wav) == WAV_HEADER_SIZE + len(SILENCE_PCM)

    async def test_analysis_failure_aborts(self):
        client = FakeModelClient({"analyzeVoice": None})

        with pytest.raises(FlowError):
            await voice_turn(client, AUDIO)

        assert client.labels() == ["analyzeVoice"]
        assert client.speech_calls == []

    async def test_missing_speech_aborts(self):
        client = FakeModelClient(speech=None)

        with pytest.raises(NoOutputError):
            await voice_turn(client, AUDIO)

    async def test_partial_frame_is_a_model_failure(self):
        client = FakeModelClient(speech=b"\x00\x00\x00")

        with pytest.raises(FlowOutputError):
            await voice_turn(client, AUDIO)

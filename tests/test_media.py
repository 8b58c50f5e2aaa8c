"""
Tests for data URI handling and WAV packaging of synthesized speech.
"""

import struct

import pytest

from youthmind.errors import MediaError
from youthmind.media import WAV_HEADER_SIZE, parse_data_uri, pcm_to_wav, to_data_uri


class TestWavPackaging:
    """pcm_to_wav must produce a fixed-format header followed by the PCM bytes."""

    def setup_method(self):
        self.pcm = bytes(range(256)) * 4  # 1024 bytes, 512 frames
        self.wav = pcm_to_wav(self.pcm)

    def test_total_length(self):
        """Header size plus PCM length, exactly."""
        assert WAV_HEADER_SIZE == 44
        assert len(self.wav) == WAV_HEADER_SIZE + len(self.pcm)

    def test_header_fields(self):
        """Mono, 24 kHz, 16-bit."""
        assert self.wav[0:4] == b"RIFF"
        assert self.wav[8:12] == b"WAVE"
        assert self.wav[12:16] == b"fmt "

        riff_size = struct.unpack("<I", self.wav[4:8])[0]
        assert riff_size == len(self.wav) - 8

        audio_format, channels, rate, byte_rate, block_align, bits = struct.unpack(
            "<HHIIHH", self.wav[20:36]
        )
        assert audio_format == 1
        assert channels == 1
        assert rate == 24000
        assert bits == 16
        assert block_align == 2
        assert byte_rate == 48000

        assert self.wav[36:40] == b"data"
        assert struct.unpack("<I", self.wav[40:44])[0] == len(self.pcm)

    def test_pcm_copied_verbatim(self):
        assert self.wav[WAV_HEADER_SIZE:] == self.pcm

    def test_partial_frame_rejected(self):
        with pytest.raises(MediaError):
            pcm_to_wav(b"\x00\x00\x00")


class TestDataUri:
    def test_parse(self):
        mime, data = parse_data_uri("data:image/png;base64,aGVsbG8=")
        assert mime == "image/png"
        assert data == b"hello"

    def test_parse_with_parameters(self):
        """Browser recordings carry codec parameters before the base64 marker."""
        mime, data = parse_data_uri("data:audio/webm;codecs=opus;base64,aGk=")
        assert mime == "audio/webm"
        assert data == b"hi"

    def test_build(self):
        assert to_data_uri("audio/wav", b"hello") == "data:audio/wav;base64,aGVsbG8="

    def test_rejects_non_data_uri(self):
        with pytest.raises(MediaError):
            parse_data_uri("https://example.com/face.png")

    def test_rejects_bad_base64(self):
        with pytest.raises(MediaError):
            parse_data_uri("data:image/png;base64,not base64!")

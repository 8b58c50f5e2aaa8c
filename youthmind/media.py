"""
Media encoding helpers: data URIs and WAV packaging of raw PCM speech.
"""

import base64
import binascii
import io
import re
import wave

from .errors import MediaError

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[^,]*?)?;base64,(?P<data>.*)$", re.DOTALL)

WAV_HEADER_SIZE = 44


def parse_data_uri(uri: str) -> tuple[str, bytes]:
    """
    Split a base64 data URI into its MIME type and decoded bytes.

    Raises:
        MediaError: If the URI is not a base64 data URI.
    """
    match = _DATA_URI_RE.match(uri.strip())
    if not match:
        raise MediaError("Expected a data URI of the form 'data:<mime>;base64,<data>'")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise MediaError(f"Invalid base64 payload in data URI: {e}") from e
    return match.group("mime"), data


def to_data_uri(mime: str, data: bytes) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def pcm_to_wav(
    pcm: bytes, channels: int = 1, rate: int = 24000, sample_width: int = 2
) -> bytes:
    """
    Wrap raw little-endian PCM samples in a RIFF/WAVE container.

    The result is a 44-byte header followed by the PCM bytes unchanged.

    Args:
        pcm: Raw sample bytes as returned by the speech model
        channels: Channel count (mono by default)
        rate: Sample rate in Hz
        sample_width: Bytes per sample (2 means 16-bit)

    Returns:
        The complete WAV file as bytes
    """
    frame_size = channels * sample_width
    if len(pcm) % frame_size:
        raise MediaError(
            f"PCM length {len(pcm)} is not a multiple of the frame size {frame_size}"
        )

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(sample_width)
        writer.setframerate(rate)
        writer.writeframes(pcm)
    return buffer.getvalue()

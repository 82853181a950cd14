"""Raw PCM to WAV transcoding for Gemini TTS output.

Gemini returns 16-bit signed little-endian mono PCM at 24 kHz with no
container. Browsers need a RIFF/WAVE header to play it.
"""

import base64
import struct

DEFAULT_SAMPLE_RATE = 24000
NUM_CHANNELS = 1
BITS_PER_SAMPLE = 16
WAV_HEADER_SIZE = 44

# RIFF, size, WAVE, "fmt ", fmt size, format, channels, rate, byte rate,
# block align, bits per sample, "data", data size. All little-endian.
_WAV_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def wav_header(data_length: int, sample_rate: int = DEFAULT_SAMPLE_RATE) -> bytes:
    """Canonical 44-byte PCM WAV header for mono 16-bit audio."""
    block_align = NUM_CHANNELS * BITS_PER_SAMPLE // 8
    return _WAV_HEADER.pack(
        b"RIFF",
        36 + data_length,
        b"WAVE",
        b"fmt ",
        16,
        1,  # PCM
        NUM_CHANNELS,
        sample_rate,
        sample_rate * block_align,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_length,
    )


def pcm_bytes_to_wav(pcm: bytes, sample_rate: int = DEFAULT_SAMPLE_RATE) -> bytes:
    """Prefix raw PCM bytes with a WAV header."""
    return wav_header(len(pcm), sample_rate) + pcm


def pcm_to_wav(base64_pcm: str, sample_rate: int = DEFAULT_SAMPLE_RATE) -> str:
    """Convert base64 raw PCM into base64 WAV.

    Args:
        base64_pcm: Base64 of 16-bit signed little-endian mono PCM
        sample_rate: Sample rate in Hz

    Returns:
        Base64 of the complete WAV file (header + data)
    """
    pcm = base64.b64decode(base64_pcm)
    return base64.b64encode(pcm_bytes_to_wav(pcm, sample_rate)).decode("ascii")


def wav_duration_seconds(wav: bytes) -> float:
    """Duration of a canonical WAV buffer, read from its header."""
    if len(wav) < WAV_HEADER_SIZE:
        return 0.0
    fields = _WAV_HEADER.unpack(wav[:WAV_HEADER_SIZE])
    byte_rate, data_length = fields[8], fields[12]
    if not byte_rate:
        return 0.0
    return data_length / byte_rate

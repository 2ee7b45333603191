"""Serialization of mono float samples into a 16-bit PCM WAV file."""

import logging
import struct
from dataclasses import dataclass

import numpy as np

from voicecast.exceptions import EncodeError

logger = logging.getLogger(__name__)

WAV_HEADER_SIZE = 44
PCM_FORMAT_TAG = 1
CHANNELS = 1
BITS_PER_SAMPLE = 16
BLOCK_ALIGN = CHANNELS * BITS_PER_SAMPLE // 8

# RIFF chunk, "fmt " subchunk (16 bytes of PCM fields), "data" subchunk header
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")

# RIFF sizes are unsigned 32-bit and exclude the first 8 bytes
_MAX_DATA_SIZE = 0xFFFFFFFF - (WAV_HEADER_SIZE - 8)


@dataclass(frozen=True)
class WavHeader:
    """Fields of a canonical 44-byte PCM WAV header."""

    riff_size: int
    format_tag: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int

    @property
    def sample_count(self) -> int:
        return self.data_size // self.block_align

    @property
    def file_size(self) -> int:
        return self.riff_size + 8


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """
    Convert float samples to little-endian signed 16-bit integers.

    Samples are clamped to [-1.0, 1.0] first. Negative values scale by
    32768 and non-negative values by 32767 so +1.0 does not overflow.
    NaN is treated as silence.
    """
    values = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0)
    clipped = np.clip(values, -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    # astype truncates toward zero
    return scaled.astype("<i2")


def build_wav_header(sample_count: int, sample_rate: int) -> bytes:
    """Build the 44-byte header for a mono 16-bit PCM payload."""
    if sample_rate <= 0:
        raise EncodeError(
            message=f"Invalid sample rate: {sample_rate}",
            sample_count=sample_count,
            details={"sample_rate": sample_rate},
        )

    data_size = sample_count * BLOCK_ALIGN
    if data_size > _MAX_DATA_SIZE:
        raise EncodeError(
            message="Merged audio is too long for a single WAV file",
            sample_count=sample_count,
        )

    byte_rate = sample_rate * BLOCK_ALIGN
    return _HEADER_STRUCT.pack(
        b"RIFF",
        WAV_HEADER_SIZE - 8 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        CHANNELS,
        sample_rate,
        byte_rate,
        BLOCK_ALIGN,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def parse_wav_header(data: bytes) -> WavHeader:
    """Read back a header written by :func:`build_wav_header`."""
    if len(data) < WAV_HEADER_SIZE:
        raise ValueError(f"WAV data too short: {len(data)} bytes")

    (
        riff, riff_size, wave, fmt, _fmt_size, format_tag, channels,
        sample_rate, byte_rate, block_align, bits, data_id, data_size,
    ) = _HEADER_STRUCT.unpack_from(data)

    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_id != b"data":
        raise ValueError("Not a canonical PCM WAV header")

    return WavHeader(
        riff_size=riff_size,
        format_tag=format_tag,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits,
        data_size=data_size,
    )


def encode_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    """
    Encode mono float samples as a complete WAV file.

    Args:
        samples: One-dimensional float samples, nominally in [-1.0, 1.0]
        sample_rate: Output sample rate in Hz

    Returns:
        Header followed by the 16-bit PCM data region

    Raises:
        EncodeError: If there are no samples, the buffer is not mono,
            or the rate is invalid
    """
    samples = np.asarray(samples)
    if samples.ndim != 1:
        raise EncodeError(
            message=f"Expected mono samples, got array with shape {samples.shape}",
        )
    if samples.size == 0:
        raise EncodeError(message="Cannot encode zero-length audio", sample_count=0)

    header = build_wav_header(samples.size, sample_rate)
    pcm = float_to_pcm16(samples)

    logger.debug(f"Encoded {samples.size} samples at {sample_rate} Hz")
    return header + pcm.tobytes()

"""Decoding of provider clips into mono float samples."""

import io
import logging
from dataclasses import dataclass

import numpy as np
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from voicecast.exceptions import DecodeError

logger = logging.getLogger(__name__)


@dataclass
class DecodedClip:
    """Raw mono samples in [-1.0, 1.0] and the rate they were decoded at."""

    samples: np.ndarray
    sample_rate: int

    @property
    def sample_count(self) -> int:
        return int(self.samples.size)

    @property
    def duration_seconds(self) -> float:
        return self.sample_count / self.sample_rate


def decode_clip(data: bytes, encoding: str = "mp3") -> DecodedClip:
    """
    Decode one encoded clip.

    Only the first channel of a multi-channel source is kept; channels
    are not mixed.

    Args:
        data: Encoded audio bytes as returned by the provider
        encoding: Container/codec name understood by ffmpeg ("mp3", "wav", ...)

    Returns:
        DecodedClip with float32 samples

    Raises:
        DecodeError: If the bytes are empty or not valid audio
    """
    if not data:
        raise DecodeError(message="Audio clip is empty")

    try:
        segment = AudioSegment.from_file(io.BytesIO(data), format=encoding)
    except CouldntDecodeError as e:
        raise DecodeError(message=f"Failed to decode {encoding} audio: {e}", cause=e)
    except FileNotFoundError as e:
        # pydub shells out to ffmpeg for compressed formats
        raise DecodeError(
            message=f"Audio decoder not available (is ffmpeg installed?): {e}",
            cause=e,
        )
    except Exception as e:
        raise DecodeError(message=f"Audio decoding failed: {e}", cause=e)

    if segment.channels > 1:
        logger.debug(f"Keeping first of {segment.channels} channels")
        segment = segment.split_to_mono()[0]

    full_scale = float(1 << (8 * segment.sample_width - 1))
    samples = np.array(segment.get_array_of_samples(), dtype=np.float32) / full_scale

    return DecodedClip(samples=samples, sample_rate=segment.frame_rate)

"""Merging of per-line clips into one downloadable WAV file."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from voicecast.config import Settings, get_settings
from voicecast.exceptions import DecodeError, IncompleteScriptError
from voicecast.models import SampleRatePolicy, ScriptLine, SynthesizedClip

from .clip_store import ClipStore
from .decoder import DecodedClip, decode_clip
from .wav_encoder import encode_wav

logger = logging.getLogger(__name__)


@dataclass
class MergedAudio:
    """A fully materialized merge result."""

    data: bytes
    sample_rate: int
    sample_count: int
    filename: str
    offsets: list[int] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        return self.sample_count / self.sample_rate


class AudioMerger:
    """
    Merges script clips into a single mono 16-bit WAV.

    Steps:
    1. Check that every script line has a live clip
    2. Decode each clip to float samples (first channel only)
    3. Take the output rate from the first clip, no resampling
    4. Concatenate in script order at explicit offsets
    5. Encode the result as WAV

    Any failure aborts the merge and nothing is returned.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def check_complete(
        self,
        lines: Sequence[ScriptLine],
        clips: ClipStore,
    ) -> list[SynthesizedClip]:
        """
        Collect the clips for a script, in script order.

        Raises:
            IncompleteScriptError: If the script is empty or any line lacks a clip
        """
        if not lines:
            raise IncompleteScriptError(message="Script is empty, nothing to merge")

        missing = [line for line in lines if line.owner_key not in clips]
        if missing:
            speakers = list(dict.fromkeys(line.speaker for line in missing))
            raise IncompleteScriptError(
                message=f"Please generate audio for: {', '.join(speakers)}",
                missing_speakers=speakers,
                details={"missing_lines": [line.line_id for line in missing]},
            )

        return clips.collect([line.owner_key for line in lines])

    async def merge(
        self,
        lines: Sequence[ScriptLine],
        clips: ClipStore,
    ) -> MergedAudio:
        """
        Merge the clips of a complete script.

        Args:
            lines: Current script lines, in order
            clips: Store holding the live clip for each line

        Returns:
            MergedAudio with the complete WAV bytes

        Raises:
            IncompleteScriptError: If any line has no clip
            DecodeError: If a clip cannot be decoded (names the speaker)
            EncodeError: If the merged samples cannot be serialized
        """
        ordered = self.check_complete(lines, clips)
        logger.info(f"Merging {len(ordered)} clips")

        decoded = await self.decode_all(ordered)
        sample_rate = self._resolve_sample_rate(ordered, decoded)
        merged, offsets = self.concatenate(decoded)

        data = encode_wav(merged, sample_rate)

        result = MergedAudio(
            data=data,
            sample_rate=sample_rate,
            sample_count=int(merged.size),
            filename=self.settings.merged_filename,
            offsets=offsets,
        )
        logger.info(
            f"Merged audio complete: {len(data)} bytes, "
            f"{result.duration_seconds:.1f} seconds at {sample_rate} Hz"
        )
        return result

    async def decode_all(self, clips: Sequence[SynthesizedClip]) -> list[DecodedClip]:
        """Decode clips, sequentially or concurrently per settings."""
        if not self.settings.concurrent_decode:
            decoded = []
            for index, clip in enumerate(clips):
                decoded.append(await self._decode_one(index, clip))
            return decoded

        results = await asyncio.gather(
            *(self._decode_one(index, clip) for index, clip in enumerate(clips)),
            return_exceptions=True,
        )
        # Report the earliest failing clip in script order
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    async def _decode_one(self, index: int, clip: SynthesizedClip) -> DecodedClip:
        try:
            decoded = await asyncio.to_thread(decode_clip, clip.data, clip.encoding)
        except DecodeError as e:
            logger.error(f"Failed to decode clip {index} ({clip.speaker}): {e.message}")
            raise DecodeError(
                message=f"Failed to decode audio for {clip.speaker}: {e.message}",
                clip_index=index,
                speaker=clip.speaker,
                cause=e,
            )
        logger.debug(
            f"Decoded clip {index} ({clip.speaker}): "
            f"{decoded.sample_count} samples at {decoded.sample_rate} Hz"
        )
        return decoded

    def _resolve_sample_rate(
        self,
        clips: Sequence[SynthesizedClip],
        decoded: Sequence[DecodedClip],
    ) -> int:
        sample_rate = decoded[0].sample_rate
        for index, (clip, item) in enumerate(zip(clips, decoded)):
            if item.sample_rate == sample_rate:
                continue
            if self.settings.sample_rate_policy == SampleRatePolicy.REJECT:
                raise DecodeError(
                    message=(
                        f"Clip for {clip.speaker} is {item.sample_rate} Hz, "
                        f"expected {sample_rate} Hz"
                    ),
                    clip_index=index,
                    speaker=clip.speaker,
                    details={
                        "sample_rate": item.sample_rate,
                        "expected_sample_rate": sample_rate,
                    },
                )
            logger.warning(
                f"Clip {index} ({clip.speaker}) is {item.sample_rate} Hz, "
                f"appending without resampling at {sample_rate} Hz"
            )
        return sample_rate

    @staticmethod
    def concatenate(decoded: Sequence[DecodedClip]) -> tuple[np.ndarray, list[int]]:
        """
        Copy decoded clips into one buffer.

        The offset of clip i is the sum of the lengths of clips 0..i-1.

        Returns:
            (merged samples, offset of each clip)
        """
        total = sum(item.sample_count for item in decoded)
        merged = np.empty(total, dtype=np.float32)

        offsets = []
        offset = 0
        for item in decoded:
            offsets.append(offset)
            merged[offset:offset + item.sample_count] = item.samples
            offset += item.sample_count

        return merged, offsets

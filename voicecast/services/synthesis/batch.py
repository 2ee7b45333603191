"""Ordered multi-line synthesis with per-line results."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from voicecast.config import Settings, get_settings
from voicecast.exceptions import SynthesisError, VoicecastError
from voicecast.models import LineStatus, ScriptLine, SynthesisModel, SynthesizedClip

from .client import SynthesisClient

logger = logging.getLogger(__name__)

ClipCallback = Callable[[SynthesizedClip], None]


@dataclass
class LineResult:
    """Outcome of one script line in a generation run."""

    line_id: int
    speaker: str
    status: LineStatus
    clip: Optional[SynthesizedClip] = None
    error: Optional[VoicecastError] = None


@dataclass
class GenerationReport:
    """Per-line results of a generation run, in script order."""

    results: list[LineResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.status == LineStatus.SUCCEEDED for r in self.results)

    @property
    def succeeded(self) -> list[LineResult]:
        return [r for r in self.results if r.status == LineStatus.SUCCEEDED]

    @property
    def failures(self) -> list[LineResult]:
        return [r for r in self.results if r.status == LineStatus.FAILED]

    @property
    def skipped(self) -> list[LineResult]:
        return [r for r in self.results if r.status == LineStatus.SKIPPED]

    def summary(self) -> str:
        """One user-facing sentence describing the run."""
        if self.ok:
            return "Audio generated successfully!"
        failed = self.failures
        if failed:
            first = failed[0]
            reason = first.error.message if first.error else "unknown error"
            return f"Failed to generate audio for {first.speaker}: {reason}"
        return "Audio generation did not complete"


class BatchSynthesizer:
    """
    Synthesizes script lines as an ordered task sequence.

    The sequential run issues one request at a time in script order and
    stops at the first failure; lines already generated keep their clips.
    The concurrent run is opt-in, attempts every line and still reports
    results in script order.
    """

    def __init__(
        self,
        client: Optional[SynthesisClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or SynthesisClient(self.settings)

    async def synthesize_line(
        self,
        line: ScriptLine,
        credential: str,
        model: SynthesisModel | str = SynthesisModel.MULTILINGUAL_V2,
        emphasize: bool = False,
    ) -> SynthesizedClip:
        """
        Synthesize a single script line into a clip.

        Raises:
            SynthesisError: If the line has no voice or the provider rejects it
            AuthError, NetworkError: From the synthesis client
        """
        if not line.has_voice:
            raise SynthesisError(
                message=f"Please select a voice for {line.speaker}",
                speaker=line.speaker,
            )

        text = line.text.upper() if emphasize else line.text
        logger.debug(f"Synthesizing {line.speaker}: {text[:50]}...")

        audio = await self.client.synthesize(
            text=text,
            voice_id=line.voice_id,
            credential=credential,
            stability=line.stability,
            speed=line.speed,
            model_id=model,
            speaker_boost=line.speaker_boost,
            style=line.style,
            speaker=line.speaker,
        )
        return SynthesizedClip(
            owner_key=line.owner_key,
            speaker=line.speaker,
            buffer=audio,
            encoding=self.output_encoding,
        )

    async def run_sequential(
        self,
        lines: Sequence[ScriptLine],
        credential: str,
        model: SynthesisModel | str = SynthesisModel.MULTILINGUAL_V2,
        emphasize: bool = False,
        on_clip: Optional[ClipCallback] = None,
    ) -> GenerationReport:
        """
        Synthesize lines one at a time, aborting at the first failure.

        ``on_clip`` is called for each clip as soon as it is produced, so a
        later failure never discards earlier work.
        """
        report = GenerationReport()
        total = len(lines)
        aborted = False

        for i, line in enumerate(lines):
            if aborted:
                report.results.append(
                    LineResult(line_id=line.line_id, speaker=line.speaker, status=LineStatus.SKIPPED)
                )
                continue

            logger.info(f"Processing line {i + 1}/{total}: {line.speaker}")
            result = await self._attempt(line, credential, model, emphasize, on_clip)
            report.results.append(result)
            if result.status == LineStatus.FAILED:
                logger.warning(f"Stopping after failure on line {i + 1}/{total}")
                aborted = True

        return report

    async def run_concurrent(
        self,
        lines: Sequence[ScriptLine],
        credential: str,
        model: SynthesisModel | str = SynthesisModel.MULTILINGUAL_V2,
        emphasize: bool = False,
        on_clip: Optional[ClipCallback] = None,
        max_concurrency: int = 4,
    ) -> GenerationReport:
        """Synthesize all lines with bounded concurrency, results in script order."""
        semaphore = asyncio.Semaphore(max(1, max_concurrency))

        async def _bounded(line: ScriptLine) -> LineResult:
            async with semaphore:
                return await self._attempt(line, credential, model, emphasize, on_clip)

        logger.info(f"Synthesizing {len(lines)} lines, up to {max_concurrency} at a time")
        results = await asyncio.gather(*(_bounded(line) for line in lines))
        return GenerationReport(results=list(results))

    async def _attempt(
        self,
        line: ScriptLine,
        credential: str,
        model: SynthesisModel | str,
        emphasize: bool,
        on_clip: Optional[ClipCallback],
    ) -> LineResult:
        try:
            clip = await self.synthesize_line(line, credential, model, emphasize)
        except VoicecastError as e:
            logger.error(f"Failed to synthesize line for {line.speaker}: {e.message}")
            return LineResult(
                line_id=line.line_id,
                speaker=line.speaker,
                status=LineStatus.FAILED,
                error=e,
            )

        if on_clip is not None:
            on_clip(clip)
        return LineResult(
            line_id=line.line_id,
            speaker=line.speaker,
            status=LineStatus.SUCCEEDED,
            clip=clip,
        )

    @property
    def output_encoding(self) -> str:
        # "mp3_44100_128" -> "mp3"
        return self.settings.elevenlabs_output_format.split("_", 1)[0]

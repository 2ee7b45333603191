"""Script state and the commands that change it."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from functools import singledispatchmethod
from typing import Optional

from voicecast.models import SINGLE_OWNER_KEY, ParsedLine, ScriptLine, ScriptMode, VoiceSettings

logger = logging.getLogger(__name__)


# =============================================================================
# Commands
# =============================================================================


@dataclass(frozen=True)
class AddLine:
    """Append a line; the speaker defaults to ``Speaker N``."""
    speaker: Optional[str] = None
    text: str = ""
    voice_id: str = ""


@dataclass(frozen=True)
class RemoveLine:
    line_id: int


@dataclass(frozen=True)
class UpdateLine:
    """Edit fields of one line. ``None`` leaves a field unchanged."""
    line_id: int
    speaker: Optional[str] = None
    text: Optional[str] = None
    stability: Optional[float] = None
    speed: Optional[float] = None
    speaker_boost: Optional[bool] = None
    style: Optional[float] = None


@dataclass(frozen=True)
class SetVoice:
    """Choose a voice for a line and every other line of the same speaker."""
    line_id: int
    voice_id: str


@dataclass(frozen=True)
class ReplaceScript:
    """Replace the whole script, e.g. after an upload."""
    lines: tuple[ParsedLine, ...]


@dataclass(frozen=True)
class ClearScript:
    pass


@dataclass(frozen=True)
class SetMode:
    mode: ScriptMode


@dataclass(frozen=True)
class Regenerate:
    """Synthesize one line again. Handled by the session, not the reducer."""
    line_id: int


Command = AddLine | RemoveLine | UpdateLine | SetVoice | ReplaceScript | ClearScript | SetMode | Regenerate


# =============================================================================
# State
# =============================================================================


@dataclass(frozen=True)
class ScriptState:
    """Immutable snapshot of the script being edited."""

    mode: ScriptMode = ScriptMode.SINGLE
    lines: tuple[ScriptLine, ...] = ()
    speaker_voices: Mapping[str, str] = field(default_factory=dict)
    next_line_id: int = 1

    def line(self, line_id: int) -> ScriptLine:
        """
        Get a line by ID.

        Raises:
            KeyError: If no line has this ID
        """
        for line in self.lines:
            if line.line_id == line_id:
                return line
        raise KeyError(f"No script line with id {line_id}")

    @property
    def owner_keys(self) -> list[str]:
        return [line.owner_key for line in self.lines]

    @property
    def live_keys(self) -> set[str]:
        """Owner keys whose clips are still meaningful in the current mode."""
        if self.mode == ScriptMode.SINGLE:
            return {SINGLE_OWNER_KEY}
        return set(self.owner_keys)


class ScriptReducer:
    """
    Applies commands to a ScriptState and returns the next state.

    Line IDs are never reused, so a removed or replaced line's owner key
    cannot match a line created later.
    """

    def __init__(self, defaults: Optional[VoiceSettings] = None):
        self.defaults = defaults or VoiceSettings()

    @singledispatchmethod
    def reduce(self, command, state: ScriptState) -> ScriptState:
        raise TypeError(f"Unsupported command: {type(command).__name__}")

    @reduce.register
    def _(self, command: AddLine, state: ScriptState) -> ScriptState:
        speaker = command.speaker or f"Speaker {len(state.lines) + 1}"
        line = self._new_line(
            state.next_line_id,
            speaker,
            command.text,
            command.voice_id or state.speaker_voices.get(speaker, ""),
        )
        return replace(state, lines=state.lines + (line,), next_line_id=state.next_line_id + 1)

    @reduce.register
    def _(self, command: RemoveLine, state: ScriptState) -> ScriptState:
        state.line(command.line_id)
        lines = tuple(line for line in state.lines if line.line_id != command.line_id)
        return replace(state, lines=lines)

    @reduce.register
    def _(self, command: UpdateLine, state: ScriptState) -> ScriptState:
        current = state.line(command.line_id)
        changes = {}
        for name in ("speaker", "text", "stability", "speed", "speaker_boost", "style"):
            value = getattr(command, name)
            if value is not None:
                changes[name] = value

        if "speaker" in changes:
            changes["speaker"] = changes["speaker"].strip()
            if not changes["speaker"]:
                raise ValueError("Speaker name must not be empty")
        updated = replace(current, **changes)
        return self._replace_line(state, updated)

    @reduce.register
    def _(self, command: SetVoice, state: ScriptState) -> ScriptState:
        speaker = state.line(command.line_id).speaker
        lines = tuple(
            replace(line, voice_id=command.voice_id)
            if line.line_id == command.line_id or line.speaker == speaker
            else line
            for line in state.lines
        )
        speaker_voices = {**state.speaker_voices, speaker: command.voice_id}
        return replace(state, lines=lines, speaker_voices=speaker_voices)

    @reduce.register
    def _(self, command: ReplaceScript, state: ScriptState) -> ScriptState:
        next_id = state.next_line_id
        lines = []
        for parsed in command.lines:
            lines.append(
                self._new_line(
                    next_id,
                    parsed.speaker,
                    parsed.text,
                    state.speaker_voices.get(parsed.speaker, ""),
                )
            )
            next_id += 1
        logger.info(f"Script replaced with {len(lines)} lines")
        return replace(state, lines=tuple(lines), next_line_id=next_id)

    @reduce.register
    def _(self, command: ClearScript, state: ScriptState) -> ScriptState:
        return replace(state, lines=())

    @reduce.register
    def _(self, command: SetMode, state: ScriptState) -> ScriptState:
        return replace(state, mode=command.mode)

    @reduce.register
    def _(self, command: Regenerate, state: ScriptState) -> ScriptState:
        state.line(command.line_id)
        return state

    def _new_line(self, line_id: int, speaker: str, text: str, voice_id: str) -> ScriptLine:
        return ScriptLine(
            line_id=line_id,
            speaker=speaker,
            text=text,
            voice_id=voice_id,
            stability=self.defaults.stability,
            speed=self.defaults.speed,
            speaker_boost=self.defaults.use_speaker_boost,
            style=self.defaults.style,
        )

    @staticmethod
    def _replace_line(state: ScriptState, updated: ScriptLine) -> ScriptState:
        lines = tuple(
            updated if line.line_id == updated.line_id else line
            for line in state.lines
        )
        return replace(state, lines=lines)

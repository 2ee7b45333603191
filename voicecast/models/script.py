"""Script lines and per-line voice parameters."""

from dataclasses import dataclass, replace

SINGLE_OWNER_KEY = "single"

STABILITY_RANGE = (0.0, 1.0)
STYLE_RANGE = (0.0, 1.0)
SPEED_RANGE = (0.5, 2.0)


def clamp(value: float, bounds: tuple[float, float]) -> float:
    """Clamp a value into an inclusive (low, high) range."""
    low, high = bounds
    return max(low, min(high, value))


@dataclass(frozen=True)
class VoiceSettings:
    """ElevenLabs voice settings for fine-tuned control."""
    stability: float = 0.5  # 0-1: Lower = more expressive, Higher = more stable
    similarity_boost: float = 0.75  # 0-1: How closely to match the original voice
    style: float = 0.0  # 0-1: Style exaggeration (for supported voices)
    use_speaker_boost: bool = True  # Enhance clarity
    speed: float = 1.0  # 0.5-2.0

    def clamped(self) -> "VoiceSettings":
        """Return a copy with every numeric field inside the provider's range."""
        return replace(
            self,
            stability=clamp(self.stability, STABILITY_RANGE),
            similarity_boost=clamp(self.similarity_boost, (0.0, 1.0)),
            style=clamp(self.style, STYLE_RANGE),
            speed=clamp(self.speed, SPEED_RANGE),
        )


@dataclass(frozen=True)
class ScriptLine:
    """
    One line of dialogue in a multi-speaker script.

    ``line_id`` is assigned once when the line is created and never reused,
    so the owner key stays stable when other lines are removed or several
    lines share a speaker name.
    """

    line_id: int
    speaker: str
    text: str
    voice_id: str = ""
    stability: float = 0.5
    speed: float = 1.0
    speaker_boost: bool = True
    style: float = 0.0

    @property
    def owner_key(self) -> str:
        return f"{self.line_id}:{self.speaker}"

    @property
    def has_voice(self) -> bool:
        return bool(self.voice_id)

    def voice_settings(self, similarity_boost: float = 0.75) -> VoiceSettings:
        """Build provider voice settings from this line's parameters."""
        return VoiceSettings(
            stability=self.stability,
            similarity_boost=similarity_boost,
            style=self.style,
            use_speaker_boost=self.speaker_boost,
            speed=self.speed,
        ).clamped()


@dataclass
class ParsedLine:
    """A ``speaker: text`` pair read from an uploaded script."""
    speaker: str
    text: str
    source_line: int = 0

"""Data models for the voicecast client."""

from .clip import SynthesizedClip
from .enums import LineStatus, SampleRatePolicy, ScriptMode, SynthesisModel, UsageLevel
from .script import SINGLE_OWNER_KEY, ParsedLine, ScriptLine, VoiceSettings, clamp
from .voice import UsageStats, Voice, VoiceLabels

__all__ = [
    # Enums
    "LineStatus",
    "SampleRatePolicy",
    "ScriptMode",
    "SynthesisModel",
    "UsageLevel",
    # Script
    "ParsedLine",
    "ScriptLine",
    "VoiceSettings",
    "SINGLE_OWNER_KEY",
    "clamp",
    # Clips
    "SynthesizedClip",
    # Provider data
    "UsageStats",
    "Voice",
    "VoiceLabels",
]

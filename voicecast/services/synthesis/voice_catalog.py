"""Helpers for presenting the provider's voice list."""

from collections.abc import Iterable
from typing import Optional

from voicecast.models import Voice

DEFAULT_CATEGORY = "Other"


def group_voices_by_category(voices: Iterable[Voice]) -> dict[str, list[Voice]]:
    """Group voices by category, keeping first-seen category and voice order."""
    groups: dict[str, list[Voice]] = {}
    for voice in voices:
        groups.setdefault(voice.category or DEFAULT_CATEGORY, []).append(voice)
    return groups


def find_voice(voices: Iterable[Voice], voice_id: str) -> Optional[Voice]:
    """Get a voice by ID."""
    return next((v for v in voices if v.voice_id == voice_id), None)


def resolve_voice(voices: Iterable[Voice], name_or_id: str) -> Optional[Voice]:
    """Get a voice by ID, falling back to a case-insensitive name match."""
    voices = list(voices)
    found = find_voice(voices, name_or_id)
    if found:
        return found
    wanted = name_or_id.strip().lower()
    return next((v for v in voices if v.name.lower() == wanted), None)


def filter_voices(voices: Iterable[Voice], query: str) -> list[Voice]:
    """Voices whose name, category or labels contain the query."""
    needle = query.lower()
    return [
        v for v in voices
        if needle in v.name.lower()
        or needle in (v.category or "").lower()
        or needle in v.label_summary.lower()
    ]

"""Synthesis client, batch runner and voice catalog helpers."""

from .batch import BatchSynthesizer, GenerationReport, LineResult
from .client import SynthesisClient
from .voice_catalog import filter_voices, find_voice, group_voices_by_category, resolve_voice

__all__ = [
    "BatchSynthesizer",
    "GenerationReport",
    "LineResult",
    "SynthesisClient",
    "filter_voices",
    "find_voice",
    "group_voices_by_category",
    "resolve_voice",
]

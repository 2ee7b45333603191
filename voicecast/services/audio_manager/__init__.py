"""Clip lifecycle, decoding, and WAV merging."""

from .audio_merger import AudioMerger, MergedAudio
from .clip_store import ClipStore
from .decoder import DecodedClip, decode_clip
from .wav_encoder import WAV_HEADER_SIZE, WavHeader, encode_wav, parse_wav_header

__all__ = [
    "AudioMerger",
    "ClipStore",
    "DecodedClip",
    "MergedAudio",
    "WAV_HEADER_SIZE",
    "WavHeader",
    "decode_clip",
    "encode_wav",
    "parse_wav_header",
]

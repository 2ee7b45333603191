"""Tests for data models."""

import pytest
from pydantic import ValidationError

from voicecast.exceptions import DecodeError, IncompleteScriptError, VoicecastError
from voicecast.models import ScriptLine, SynthesizedClip, UsageLevel, UsageStats, Voice, VoiceSettings


class TestUsageStats:
    """Test suite for UsageStats."""

    @pytest.mark.parametrize(
        "count,level",
        [(0, UsageLevel.OK), (7000, UsageLevel.OK), (7001, UsageLevel.WARNING),
         (9000, UsageLevel.WARNING), (9001, UsageLevel.CRITICAL)],
    )
    def test_levels(self, count: int, level: UsageLevel):
        stats = UsageStats(character_count=count, character_limit=10000)
        assert stats.level == level

    def test_remaining(self):
        stats = UsageStats(character_count=2500, character_limit=10000)
        assert stats.remaining_characters == 7500
        assert stats.usage_ratio == 0.25

    def test_zero_limit_is_critical(self):
        assert UsageStats(character_count=0, character_limit=0).level == UsageLevel.CRITICAL

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            UsageStats(character_count=-1, character_limit=10)


class TestVoice:
    """Test suite for Voice."""

    def test_label_summary_empty_without_labels(self):
        assert Voice(voice_id="v", name="Plain").label_summary == ""

    def test_voice_is_read_only(self, sample_voices: list[Voice]):
        with pytest.raises(ValidationError):
            sample_voices[0].name = "Changed"


class TestVoiceSettings:
    """Test suite for VoiceSettings clamping."""

    def test_clamped(self):
        clamped = VoiceSettings(stability=-1.0, similarity_boost=2.0, style=3.0, speed=5.0).clamped()
        assert (clamped.stability, clamped.similarity_boost, clamped.style, clamped.speed) == (
            0.0, 1.0, 1.0, 2.0,
        )

    def test_line_voice_settings_are_clamped(self):
        line = ScriptLine(line_id=1, speaker="Alice", text="Hi", speed=0.1)
        assert line.voice_settings().speed == 0.5


class TestSynthesizedClip:
    """Test suite for SynthesizedClip."""

    def test_release_drops_buffer(self):
        clip = SynthesizedClip(owner_key="1:Alice", speaker="Alice", buffer=b"abc")
        assert clip.size == 3

        clip.release()

        assert clip.released
        assert clip.size == 0
        with pytest.raises(ValueError):
            _ = clip.data


class TestErrors:
    """Test suite for error details."""

    def test_to_dict(self):
        error = DecodeError(message="bad clip", clip_index=2, speaker="Bob")
        assert error.to_dict() == {
            "error": "DecodeError",
            "message": "bad clip",
            "details": {"clip_index": 2, "speaker": "Bob"},
        }

    def test_incomplete_script_default_message(self):
        error = IncompleteScriptError(missing_speakers=["Alice"])
        assert isinstance(error, VoicecastError)
        assert error.message == "Please generate all audio files first"
        assert error.missing_speakers == ["Alice"]

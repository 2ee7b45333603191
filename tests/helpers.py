"""Audio builders and in-memory fakes for the provider and keyring."""

import io
import wave
from typing import Any, Optional

import numpy as np
from keyring.errors import PasswordDeleteError

from voicecast.config import Settings
from voicecast.exceptions import AuthError
from voicecast.models import UsageStats, Voice
from voicecast.services.audio_manager import encode_wav
from voicecast.services.synthesis import SynthesisClient

VALID_KEY = "test-elevenlabs-key"


def tone(
    sample_count: int,
    sample_rate: int = 16000,
    frequency: float = 440.0,
    amplitude: float = 0.5,
) -> np.ndarray:
    """Sine tone as float32 samples."""
    t = np.arange(sample_count) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def wav_clip(sample_count: int, sample_rate: int = 16000, frequency: float = 440.0) -> bytes:
    """A mono 16-bit WAV clip, decodable without ffmpeg."""
    return encode_wav(tone(sample_count, sample_rate, frequency), sample_rate)


def stereo_wav_clip(left: np.ndarray, right: np.ndarray, sample_rate: int = 16000) -> bytes:
    """A 16-bit stereo WAV clip with distinct channels."""
    interleaved = np.empty(left.size * 2, dtype="<i2")
    interleaved[0::2] = (left * 32767).astype("<i2")
    interleaved[1::2] = (right * 32767).astype("<i2")
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(2)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(interleaved.tobytes())
    return buffer.getvalue()


class FakeSynthesisClient(SynthesisClient):
    """
    Synthesis client that answers from memory.

    Each text yields a WAV clip of ``samples_per_char * len(text)`` samples.
    Texts listed in ``failures`` raise the mapped exception instead.
    """

    def __init__(
        self,
        settings: Settings,
        voices: Optional[list[Voice]] = None,
        failures: Optional[dict[str, Exception]] = None,
        sample_rate: int = 16000,
        samples_per_char: int = 100,
    ):
        super().__init__(settings, client_factory=lambda credential: None)
        self.voices = voices or []
        self.failures = failures or {}
        self.sample_rate = sample_rate
        self.samples_per_char = samples_per_char
        self.calls: list[dict[str, Any]] = []

    async def list_voices(self, credential: str) -> list[Voice]:
        if credential != VALID_KEY:
            raise AuthError(message="Failed to load voices. Please check your API key.", status_code=401)
        return list(self.voices)

    async def synthesize(self, text: str, voice_id: str, credential: str, **kwargs: Any) -> bytes:
        self.calls.append({"text": text, "voice_id": voice_id, "credential": credential, **kwargs})
        if text in self.failures:
            raise self.failures[text]
        return wav_clip(self.samples_per_char * len(text), self.sample_rate)

    async def get_usage(self, credential: str) -> UsageStats:
        return UsageStats(character_count=1200, character_limit=10000, can_extend_limit=False)


class FakeKeyring:
    """In-memory stand-in for the ``keyring`` module functions."""

    def __init__(self):
        self.passwords: dict[tuple[str, str], str] = {}

    def get_password(self, service_name: str, username: str) -> Optional[str]:
        return self.passwords.get((service_name, username))

    def set_password(self, service_name: str, username: str, password: str) -> None:
        self.passwords[(service_name, username)] = password

    def delete_password(self, service_name: str, username: str) -> None:
        if self.passwords.pop((service_name, username), None) is None:
            raise PasswordDeleteError("Password not found")

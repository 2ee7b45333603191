"""Pytest fixtures for voicecast tests."""

import pytest

from voicecast.config import Settings
from voicecast.models import Voice, VoiceLabels
from voicecast.services import credentials
from voicecast.services.credentials import InMemoryCredentialStore

from tests.helpers import FakeKeyring, FakeSynthesisClient


@pytest.fixture
def settings() -> Settings:
    """Test settings producing WAV clips."""
    return Settings(
        elevenlabs_output_format="wav_16000",
        credential_service_name="voicecast-test",
        log_level="DEBUG",
    )


@pytest.fixture
def sample_voices() -> list[Voice]:
    """Two premade voices and one cloned voice without a category."""
    return [
        Voice(
            voice_id="21m00Tcm4TlvDq8ikWAM",
            name="Rachel",
            preview_url="https://example.com/rachel.mp3",
            category="premade",
            labels=VoiceLabels(gender="female", age="young", accent="american"),
        ),
        Voice(
            voice_id="pNInz6obpgDQGcFmaJgB",
            name="Adam",
            category="premade",
            labels=VoiceLabels(gender="male", accent="american"),
        ),
        Voice(voice_id="cloned-voice-0001", name="My Clone"),
    ]


@pytest.fixture
def fake_client(settings: Settings, sample_voices: list[Voice]) -> FakeSynthesisClient:
    return FakeSynthesisClient(settings, voices=sample_voices)


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def fake_keyring(monkeypatch) -> FakeKeyring:
    """Replace the OS keyring used by KeyringCredentialStore."""
    backend = FakeKeyring()
    monkeypatch.setattr(credentials, "keyring", backend)
    return backend

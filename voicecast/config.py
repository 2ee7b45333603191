"""Application configuration from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from voicecast.models.enums import SampleRatePolicy, SynthesisModel


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # ElevenLabs
    elevenlabs_base_url: str = "https://api.elevenlabs.io"
    elevenlabs_model: SynthesisModel = SynthesisModel.MULTILINGUAL_V2
    elevenlabs_output_format: str = "mp3_44100_128"
    request_timeout_seconds: float = 60.0

    # Voice parameter defaults (used for new lines and single mode)
    default_stability: float = Field(default=0.5, ge=0.0, le=1.0)
    default_similarity_boost: float = Field(default=0.75, ge=0.0, le=1.0)
    default_style: float = Field(default=0.0, ge=0.0, le=1.0)
    default_speed: float = Field(default=1.0, ge=0.5, le=2.0)
    default_speaker_boost: bool = True

    # Credential persistence (OS keyring service name)
    credential_service_name: str = "voicecast"

    # Merge output
    merged_filename: str = "merged_audio.wav"
    concurrent_decode: bool = Field(
        default=False,
        description="Decode clips concurrently before concatenation (order is kept by offsets)",
    )
    sample_rate_policy: SampleRatePolicy = Field(
        default=SampleRatePolicy.ACCEPT,
        description="What to do when clips report different sample rates",
    )

    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

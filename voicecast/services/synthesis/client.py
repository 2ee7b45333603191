"""ElevenLabs text-to-speech client."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Optional

import httpx
from elevenlabs import ElevenLabs
from elevenlabs import VoiceSettings as ProviderVoiceSettings
from elevenlabs.core import ApiError as ElevenLabsAPIError

from voicecast.config import Settings, get_settings
from voicecast.exceptions import AuthError, NetworkError, SynthesisError
from voicecast.models import SynthesisModel, UsageStats, Voice, VoiceSettings

logger = logging.getLogger(__name__)


def provider_message(error: ElevenLabsAPIError) -> str:
    """Extract the human-readable message from an ElevenLabs error body."""
    body = error.body
    if isinstance(body, dict):
        detail = body.get("detail", body)
        if isinstance(detail, dict):
            return str(detail.get("message") or detail.get("status") or detail)
        return str(detail)
    if body:
        return str(body)
    return f"HTTP {error.status_code}"


class SynthesisClient:
    """
    Talks to the ElevenLabs API on behalf of one caller-supplied credential.

    The credential is passed on every call; no API key is held between
    calls. Nothing is retried: the caller decides what to do on failure.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[Callable[[str], Any]] = None,
    ):
        self.settings = settings or get_settings()
        self._client_factory = client_factory or self._create_client

    def _create_client(self, credential: str) -> ElevenLabs:
        return ElevenLabs(
            api_key=credential,
            base_url=self.settings.elevenlabs_base_url,
            timeout=self.settings.request_timeout_seconds,
        )

    def _client_for(self, credential: Optional[str]) -> Any:
        if not credential or not credential.strip():
            raise AuthError(message="API key is required")
        return self._client_factory(credential.strip())

    async def list_voices(self, credential: str) -> list[Voice]:
        """
        Get the voices available to a credential, in provider order.

        Raises:
            AuthError: If the credential is missing or the provider rejects the request
            NetworkError: On transport failure
        """
        client = self._client_for(credential)
        logger.info("Fetching voices from ElevenLabs")

        try:
            response = await asyncio.to_thread(client.voices.get_all)
        except ElevenLabsAPIError as e:
            logger.error(f"ElevenLabs rejected voice listing: HTTP {e.status_code}")
            raise AuthError(
                message="Failed to load voices. Please check your API key.",
                status_code=e.status_code,
                cause=e,
            )
        except httpx.TransportError as e:
            logger.error(f"Network error while fetching voices: {e}")
            raise NetworkError(operation="list_voices", cause=e)

        voices = [Voice.model_validate(v) for v in response.voices]
        logger.info(f"Loaded {len(voices)} voices")
        return voices

    async def synthesize(
        self,
        text: str,
        voice_id: str,
        credential: str,
        stability: float = 0.5,
        speed: float = 1.0,
        model_id: SynthesisModel | str = SynthesisModel.MULTILINGUAL_V2,
        speaker_boost: bool = True,
        style: float = 0.0,
        speaker: Optional[str] = None,
    ) -> bytes:
        """
        Convert one text to encoded audio.

        Stability and style are clamped to [0, 1] and speed to [0.5, 2.0]
        before the request is sent.

        Args:
            text: Text to speak, must be non-empty
            voice_id: ElevenLabs voice ID
            credential: ElevenLabs API key
            stability: Voice stability
            speed: Speaking rate multiplier
            model_id: ElevenLabs model ID
            speaker_boost: Enable speaker boost
            style: Style exaggeration
            speaker: Script speaker name, used only in error details

        Returns:
            Encoded audio bytes (MP3 with the default output format)

        Raises:
            AuthError: If the credential is missing
            SynthesisError: If the provider rejects the request
            NetworkError: On transport failure
        """
        if not text or not text.strip():
            raise SynthesisError(
                message="Text must not be empty",
                voice_id=voice_id,
                speaker=speaker,
            )
        if not voice_id:
            raise SynthesisError(message="A voice must be selected", speaker=speaker)

        client = self._client_for(credential)
        model = model_id.value if isinstance(model_id, SynthesisModel) else model_id
        voice_settings = VoiceSettings(
            stability=stability,
            similarity_boost=self.settings.default_similarity_boost,
            style=style,
            use_speaker_boost=speaker_boost,
            speed=speed,
        ).clamped()

        logger.info(
            f"Synthesizing {len(text)} chars with voice {voice_id[:8]}... model {model}"
        )

        def _convert() -> bytes:
            audio_generator = client.text_to_speech.convert(
                voice_id=voice_id,
                model_id=model,
                text=text,
                output_format=self.settings.elevenlabs_output_format,
                voice_settings=ProviderVoiceSettings(
                    stability=voice_settings.stability,
                    similarity_boost=voice_settings.similarity_boost,
                    style=voice_settings.style,
                    use_speaker_boost=voice_settings.use_speaker_boost,
                    speed=voice_settings.speed,
                ),
            )
            # The response streams lazily, so errors can surface while iterating
            return b"".join(audio_generator)

        try:
            audio_bytes = await asyncio.to_thread(_convert)
        except ElevenLabsAPIError as e:
            message = provider_message(e)
            logger.error(f"ElevenLabs API error (HTTP {e.status_code}): {message}")
            raise SynthesisError(
                message=message,
                voice_id=voice_id,
                speaker=speaker,
                status_code=e.status_code,
                cause=e,
            )
        except httpx.TransportError as e:
            logger.error(f"Network error during synthesis: {e}")
            raise NetworkError(operation="synthesize", cause=e)

        if not audio_bytes:
            raise SynthesisError(
                message="Provider returned no audio",
                voice_id=voice_id,
                speaker=speaker,
            )

        logger.info(f"Generated audio: {len(audio_bytes)} bytes")
        return audio_bytes

    async def get_usage(self, credential: str) -> UsageStats:
        """
        Get character quota usage for a credential.

        Raises:
            AuthError: If the credential is missing or rejected
            NetworkError: On transport failure
        """
        client = self._client_for(credential)

        try:
            subscription = await asyncio.to_thread(client.user.subscription.get)
        except ElevenLabsAPIError as e:
            logger.error(f"ElevenLabs rejected usage request: HTTP {e.status_code}")
            raise AuthError(
                message="Failed to fetch usage stats",
                status_code=e.status_code,
                cause=e,
            )
        except httpx.TransportError as e:
            logger.error(f"Network error while fetching usage: {e}")
            raise NetworkError(operation="get_usage", cause=e)

        return UsageStats(
            character_count=subscription.character_count,
            character_limit=subscription.character_limit,
            can_extend_limit=bool(getattr(subscription, "can_extend_character_limit", False)),
        )

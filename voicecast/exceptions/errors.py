"""Custom exception classes for synthesis, merging and script handling."""

from typing import Any, Optional


class VoicecastError(Exception):
    """Base exception for all voicecast errors."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for user-facing reporting."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class AuthError(VoicecastError):
    """Missing credential, or the provider rejected it."""

    def __init__(
        self,
        message: str = "Invalid or missing API key",
        status_code: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, details=details, **kwargs)


class NetworkError(VoicecastError):
    """Transport or connectivity failure while talking to the provider."""

    def __init__(
        self,
        message: str = "Could not reach the text-to-speech provider",
        operation: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details, **kwargs)


class SynthesisError(VoicecastError):
    """The provider rejected a specific synthesis request."""

    def __init__(
        self,
        message: str = "Failed to synthesize audio",
        voice_id: Optional[str] = None,
        speaker: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if voice_id:
            details["voice_id"] = voice_id
        if speaker:
            details["speaker"] = speaker
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, details=details, **kwargs)


class IncompleteScriptError(VoicecastError):
    """Merge attempted before every script line has a clip."""

    def __init__(
        self,
        message: str = "Please generate all audio files first",
        missing_speakers: Optional[list[str]] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        self.missing_speakers = list(missing_speakers or [])
        if self.missing_speakers:
            details["missing_speakers"] = self.missing_speakers
        super().__init__(message, details=details, **kwargs)


class DecodeError(VoicecastError):
    """A clip's bytes could not be decoded into samples."""

    def __init__(
        self,
        message: str = "Failed to decode audio clip",
        clip_index: Optional[int] = None,
        speaker: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        self.clip_index = clip_index
        self.speaker = speaker
        if clip_index is not None:
            details["clip_index"] = clip_index
        if speaker:
            details["speaker"] = speaker
        super().__init__(message, details=details, **kwargs)


class EncodeError(VoicecastError):
    """The merged samples could not be serialized to a WAV file."""

    def __init__(
        self,
        message: str = "Failed to encode merged audio",
        sample_count: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if sample_count is not None:
            details["sample_count"] = sample_count
        super().__init__(message, details=details, **kwargs)


class ScriptParseError(VoicecastError):
    """An uploaded script could not be read."""

    def __init__(
        self,
        message: str = "Failed to parse script",
        line_number: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if line_number:
            details["line_number"] = line_number
        super().__init__(message, details=details, **kwargs)


class CredentialStoreError(VoicecastError):
    """Reading or writing the persisted credential failed."""

    def __init__(
        self,
        message: str = "Credential storage operation failed",
        service_name: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if service_name:
            details["service_name"] = service_name
        super().__init__(message, details=details, **kwargs)

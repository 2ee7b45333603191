"""Custom exceptions for the voicecast client."""

from .errors import (
    VoicecastError,
    AuthError,
    NetworkError,
    SynthesisError,
    IncompleteScriptError,
    DecodeError,
    EncodeError,
    ScriptParseError,
    CredentialStoreError,
)

__all__ = [
    "VoicecastError",
    "AuthError",
    "NetworkError",
    "SynthesisError",
    "IncompleteScriptError",
    "DecodeError",
    "EncodeError",
    "ScriptParseError",
    "CredentialStoreError",
]

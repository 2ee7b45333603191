"""Session state tying together credential, script, clips and merging."""

import logging
from typing import Optional

from voicecast.config import Settings, get_settings
from voicecast.exceptions import AuthError, SynthesisError
from voicecast.models import (
    SINGLE_OWNER_KEY,
    ScriptLine,
    ScriptMode,
    SynthesisModel,
    SynthesizedClip,
    UsageStats,
    Voice,
    VoiceSettings,
)
from voicecast.services.audio_manager import AudioMerger, ClipStore, MergedAudio
from voicecast.services.credentials import API_KEY_STORAGE_KEY, CredentialStore, KeyringCredentialStore
from voicecast.services.script_engine import (
    Command,
    Regenerate,
    ReplaceScript,
    ScriptReducer,
    ScriptState,
    SetMode,
    parse_script_text,
)
from voicecast.services.synthesis import BatchSynthesizer, GenerationReport, SynthesisClient

logger = logging.getLogger(__name__)


class StudioSession:
    """
    Explicit application state for one user session.

    Holds the credential, the loaded voices, the script and the clip of
    each line. Script edits are commands applied through a reducer; any
    clip whose owner key no longer belongs to the script is released after
    every command. Closing the session releases every clip.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        synthesis_client: Optional[SynthesisClient] = None,
        credential_store: Optional[CredentialStore] = None,
        audio_merger: Optional[AudioMerger] = None,
        clip_store: Optional[ClipStore] = None,
    ):
        self.settings = settings or get_settings()

        self.synthesis_client = synthesis_client or SynthesisClient(self.settings)
        self.batch = BatchSynthesizer(self.synthesis_client, self.settings)
        self.credential_store = credential_store or KeyringCredentialStore(
            self.settings.credential_service_name
        )
        self.merger = audio_merger or AudioMerger(self.settings)
        self.clips = clip_store or ClipStore()

        self.reducer = ScriptReducer(
            VoiceSettings(
                stability=self.settings.default_stability,
                similarity_boost=self.settings.default_similarity_boost,
                style=self.settings.default_style,
                use_speaker_boost=self.settings.default_speaker_boost,
                speed=self.settings.default_speed,
            )
        )
        self.state = ScriptState()

        self.credential: Optional[str] = None
        self.voices: list[Voice] = []
        self.model: SynthesisModel = self.settings.elevenlabs_model
        self.emphasize = False

    async def __aenter__(self) -> "StudioSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    # =========================================================================
    # Credential & reference data
    # =========================================================================

    async def start(self) -> bool:
        """
        Restore a stored credential and load its voices.

        Returns:
            True if a stored credential was found and accepted
        """
        stored = self.credential_store.get(API_KEY_STORAGE_KEY)
        if not stored:
            return False
        self.credential = stored
        await self.load_voices()
        return True

    async def set_credential(self, credential: str, persist: bool = True) -> list[Voice]:
        """Validate a credential by loading its voices, then keep it."""
        voices = await self.synthesis_client.list_voices(credential)
        self.credential = credential.strip()
        self.voices = voices
        if persist:
            self.credential_store.set(API_KEY_STORAGE_KEY, self.credential)
        return voices

    def forget_credential(self) -> None:
        """Drop the credential from the session and from storage."""
        self.credential = None
        self.voices = []
        self.credential_store.remove(API_KEY_STORAGE_KEY)

    async def load_voices(self) -> list[Voice]:
        self.voices = await self.synthesis_client.list_voices(self._require_credential())
        return self.voices

    async def get_usage(self) -> UsageStats:
        return await self.synthesis_client.get_usage(self._require_credential())

    def _require_credential(self) -> str:
        if not self.credential:
            raise AuthError(message="API key is required")
        return self.credential

    # =========================================================================
    # Script editing
    # =========================================================================

    @property
    def lines(self) -> tuple[ScriptLine, ...]:
        return self.state.lines

    def dispatch(self, command: Command) -> ScriptState:
        """Apply an editing command and release clips it made stale."""
        self.state = self.reducer.reduce(command, self.state)
        released = self.clips.retain(self.state.live_keys)
        if released:
            logger.info(f"Released {len(released)} stale clips after {type(command).__name__}")
        return self.state

    def upload_script(self, text: str) -> ScriptState:
        """Replace the script with the contents of an uploaded file."""
        self.dispatch(SetMode(ScriptMode.MULTIPLE))
        return self.dispatch(ReplaceScript(tuple(parse_script_text(text))))

    async def handle(self, command: Command) -> ScriptState:
        """Apply any command, including ones that synthesize audio."""
        if isinstance(command, Regenerate):
            await self.generate_line(command.line_id)
            return self.state
        return self.dispatch(command)

    # =========================================================================
    # Synthesis
    # =========================================================================

    async def generate_line(self, line_id: int) -> Optional[SynthesizedClip]:
        """
        Generate or regenerate one line.

        On success the previous clip for the line is released; on failure
        it is left untouched and the error propagates.

        Returns:
            The stored clip, or None if the line was removed while its
            request was in flight

        Raises:
            SynthesisError: If the session is not in script mode
        """
        line = self.state.line(line_id)
        if line.owner_key not in self.state.live_keys:
            raise SynthesisError(
                message=f"Switch to script mode to generate audio for {line.speaker}",
                speaker=line.speaker,
            )

        clip = await self.batch.synthesize_line(
            line, self._require_credential(), self.model, self.emphasize
        )
        if not self._store(clip):
            return None
        logger.info(f"Generated audio for {line.speaker}")
        return clip

    async def generate_all(self, concurrent: bool = False) -> GenerationReport:
        """
        Generate every script line.

        Sequential by default: stops at the first failing line and keeps the
        clips already produced.
        """
        credential = self._require_credential()
        lines = list(self.state.lines)
        if concurrent:
            report = await self.batch.run_concurrent(
                lines, credential, self.model, self.emphasize, on_clip=self._store
            )
        else:
            report = await self.batch.run_sequential(
                lines, credential, self.model, self.emphasize, on_clip=self._store
            )
        logger.info(report.summary())
        return report

    async def synthesize_single(self, text: str, voice_id: str) -> SynthesizedClip:
        """
        Single mode: one text, one voice, default voice parameters.

        The session switches to single mode only after the provider returns
        audio, so a failed request leaves the script clips in place.
        """
        credential = self._require_credential()

        audio = await self.synthesis_client.synthesize(
            text=text.upper() if self.emphasize else text,
            voice_id=voice_id,
            credential=credential,
            stability=self.settings.default_stability,
            speed=self.settings.default_speed,
            model_id=self.model,
            speaker_boost=self.settings.default_speaker_boost,
            style=self.settings.default_style,
        )
        self.dispatch(SetMode(ScriptMode.SINGLE))

        clip = SynthesizedClip(
            owner_key=SINGLE_OWNER_KEY,
            speaker=SINGLE_OWNER_KEY,
            buffer=audio,
            encoding=self.batch.output_encoding,
        )
        self._store(clip)
        return clip

    def _store(self, clip: SynthesizedClip) -> bool:
        # A line removed while its request was in flight must not get a clip
        if clip.owner_key not in self.state.live_keys:
            logger.info(f"Discarding clip for removed line {clip.owner_key}")
            clip.release()
            return False
        self.clips.put(clip)
        return True

    # =========================================================================
    # Output
    # =========================================================================

    async def merge(self) -> MergedAudio:
        """Merge the clips of the current script into one WAV file."""
        return await self.merger.merge(self.state.lines, self.clips)

    def line_download(self, line_id: int) -> tuple[str, bytes]:
        """
        Get the filename and bytes for one line's clip.

        Raises:
            KeyError: If the line does not exist or has no clip
        """
        line = self.state.line(line_id)
        clip = self.clips.get(line.owner_key)
        if clip is None:
            raise KeyError(f"No audio generated for {line.speaker}")
        return f"{line.speaker}_audio.{clip.encoding}", clip.data

    def single_download(self) -> tuple[str, bytes]:
        """
        Get the filename and bytes of the single-mode clip.

        Raises:
            KeyError: If nothing was generated in single mode
        """
        clip = self.clips.get(SINGLE_OWNER_KEY)
        if clip is None:
            raise KeyError("No audio generated")
        return f"audio.{clip.encoding}", clip.data

    def close(self) -> None:
        """Release every clip held by the session."""
        self.clips.clear()

"""Tests for the command-line interface."""

import pytest

from voicecast import main as cli
from voicecast.config import Settings
from voicecast.exceptions import SynthesisError, VoicecastError
from voicecast.services import StudioSession
from voicecast.services.audio_manager import parse_wav_header
from voicecast.services.credentials import API_KEY_STORAGE_KEY

from tests.helpers import VALID_KEY, FakeSynthesisClient


@pytest.fixture(autouse=True)
def patched_cli(monkeypatch, settings: Settings, fake_client: FakeSynthesisClient, credential_store):
    """Route every CLI session to the fake provider and in-memory store."""

    def make_session(session_settings: Settings) -> StudioSession:
        return StudioSession(
            session_settings, synthesis_client=fake_client, credential_store=credential_store
        )

    monkeypatch.setattr(cli, "StudioSession", make_session)
    monkeypatch.setattr(cli, "get_settings", lambda: settings)


@pytest.fixture
def script_file(tmp_path):
    path = tmp_path / "dialogue.txt"
    path.write_text("Alice: Hello there\nBob: Hi Alice\nAlice: Bye\n", encoding="utf-8")
    return path


class TestScriptCommand:
    """Test suite for the script command."""

    def test_generates_merged_wav(self, tmp_path, script_file, capsys):
        output = tmp_path / "out.wav"
        lines_dir = tmp_path / "lines"

        cli.main([
            "--api-key", VALID_KEY,
            "script", str(script_file),
            "--voice", "Alice=Rachel",
            "--voice", "Bob=pNInz6obpgDQGcFmaJgB",
            "-o", str(output),
            "--lines-dir", str(lines_dir),
        ])

        header = parse_wav_header(output.read_bytes())
        assert header.channels == 1
        assert header.sample_rate == 16000
        assert sorted(p.name for p in lines_dir.iterdir()) == [
            "001_Alice_audio.wav",
            "002_Bob_audio.wav",
            "003_Alice_audio.wav",
        ]
        assert "Audio generated successfully!" in capsys.readouterr().out

    def test_voice_names_resolve_to_ids(self, tmp_path, script_file, fake_client):
        cli.main([
            "--api-key", VALID_KEY,
            "script", str(script_file),
            "--voice", "Alice=rachel",
            "--voice", "Bob=Adam",
            "-o", str(tmp_path / "out.wav"),
        ])

        assert [call["voice_id"] for call in fake_client.calls] == [
            "21m00Tcm4TlvDq8ikWAM",
            "pNInz6obpgDQGcFmaJgB",
            "21m00Tcm4TlvDq8ikWAM",
        ]

    def test_unvoiced_speaker_is_an_error(self, tmp_path, script_file, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([
                "--api-key", VALID_KEY,
                "script", str(script_file),
                "--voice", "Alice=Rachel",
                "-o", str(tmp_path / "out.wav"),
            ])

        assert exc_info.value.code == 1
        assert "Voice selection is required for all speakers: Bob" in capsys.readouterr().err

    def test_failed_line_exits_without_output(self, tmp_path, script_file, fake_client, capsys):
        fake_client.failures["Hi Alice"] = SynthesisError(message="Quota exceeded")
        output = tmp_path / "out.wav"

        with pytest.raises(SystemExit) as exc_info:
            cli.main([
                "--api-key", VALID_KEY,
                "script", str(script_file),
                "--voice", "Alice=Rachel",
                "--voice", "Bob=Adam",
                "-o", str(output),
            ])

        assert exc_info.value.code == 1
        assert not output.exists()
        assert "Failed to generate audio for Bob: Quota exceeded" in capsys.readouterr().err

    def test_missing_stored_key(self, script_file, capsys):
        with pytest.raises(SystemExit):
            cli.main(["script", str(script_file)])
        assert "No API key stored" in capsys.readouterr().err


class TestAccountCommands:
    """Test suite for login, logout, voices, usage and say."""

    def test_login_then_voices(self, credential_store, capsys):
        cli.main(["login", VALID_KEY])
        assert credential_store.get(API_KEY_STORAGE_KEY) == VALID_KEY

        cli.main(["voices"])
        out = capsys.readouterr().out
        assert "premade:" in out
        assert "Other:" in out
        assert "Rachel  [female · young · american]" in out

    def test_voices_filter(self, capsys):
        cli.main(["--api-key", VALID_KEY, "voices", "--filter", "nobody"])
        assert "No matching voices found." in capsys.readouterr().out

    def test_logout(self, credential_store):
        credential_store.set(API_KEY_STORAGE_KEY, VALID_KEY)
        cli.main(["logout"])
        assert credential_store.get(API_KEY_STORAGE_KEY) is None

    def test_usage(self, capsys):
        cli.main(["--api-key", VALID_KEY, "usage"])
        out = capsys.readouterr().out
        assert "1,200 / 10,000" in out
        assert "(ok)" in out

    def test_say_writes_single_clip(self, tmp_path, fake_client):
        output = tmp_path / "hello.wav"
        cli.main(["--api-key", VALID_KEY, "say", "Hello", "--voice", "Adam", "-o", str(output), "--emphasize"])

        assert output.read_bytes()[:4] == b"RIFF"
        assert fake_client.calls[-1]["text"] == "HELLO"
        assert fake_client.calls[-1]["voice_id"] == "pNInz6obpgDQGcFmaJgB"

    def test_no_command_prints_help(self, capsys):
        cli.main([])
        assert "usage: voicecast" in capsys.readouterr().out


class TestVoiceAssignments:
    """Test suite for SPEAKER=VOICE parsing."""

    def test_parses_pairs(self):
        assert cli._parse_voice_assignments(["Alice = Rachel", "Dr. Who=abc"]) == {
            "Alice": "Rachel",
            "Dr. Who": "abc",
        }

    @pytest.mark.parametrize("value", ["Alice", "=Rachel", "Alice="])
    def test_rejects_malformed(self, value: str):
        with pytest.raises(VoicecastError):
            cli._parse_voice_assignments([value])

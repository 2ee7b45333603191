"""Command-line entry point for the voicecast client."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from voicecast import __version__
from voicecast.config import Settings, get_settings
from voicecast.exceptions import VoicecastError
from voicecast.models import ScriptMode, SynthesisModel
from voicecast.services import StudioSession
from voicecast.services.script_engine import ReplaceScript, SetMode, SetVoice, read_script_file
from voicecast.services.synthesis import filter_voices, group_voices_by_category, resolve_voice

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def _open_session(args: argparse.Namespace, settings: Settings) -> StudioSession:
    """Create a session using --api-key or the stored credential."""
    session = StudioSession(settings)
    session.model = SynthesisModel(args.model) if getattr(args, "model", None) else settings.elevenlabs_model
    session.emphasize = getattr(args, "emphasize", False)

    if args.api_key:
        await session.set_credential(args.api_key, persist=False)
    elif not await session.start():
        raise VoicecastError("No API key stored. Run 'voicecast login <api_key>' first.")
    return session


def _parse_voice_assignments(values: list[str]) -> dict[str, str]:
    assignments = {}
    for value in values:
        speaker, sep, voice = value.partition("=")
        if not sep or not speaker.strip() or not voice.strip():
            raise VoicecastError(f"Invalid --voice value '{value}', expected SPEAKER=VOICE")
        assignments[speaker.strip()] = voice.strip()
    return assignments


async def cmd_login(args: argparse.Namespace, settings: Settings) -> None:
    session = StudioSession(settings)
    voices = await session.set_credential(args.api_key)
    print(f"API key saved. {len(voices)} voices available.")


async def cmd_logout(args: argparse.Namespace, settings: Settings) -> None:
    StudioSession(settings).forget_credential()
    print("API key removed.")


async def cmd_voices(args: argparse.Namespace, settings: Settings) -> None:
    async with await _open_session(args, settings) as session:
        voices = session.voices
        if args.filter:
            voices = filter_voices(voices, args.filter)
        if not voices:
            print("No matching voices found.")
            return
        for category, group in group_voices_by_category(voices).items():
            print(f"{category}:")
            for voice in group:
                labels = f"  [{voice.label_summary}]" if voice.label_summary else ""
                print(f"  {voice.voice_id}  {voice.name}{labels}")


async def cmd_usage(args: argparse.Namespace, settings: Settings) -> None:
    async with await _open_session(args, settings) as session:
        stats = await session.get_usage()
        print(f"Characters used: {stats.character_count:,} / {stats.character_limit:,}")
        print(f"Remaining:       {stats.remaining_characters:,}")
        print(f"Usage:           {stats.usage_ratio:.0%} ({stats.level.value})")
        if stats.can_extend_limit:
            print("Your plan can extend the character limit.")


async def cmd_say(args: argparse.Namespace, settings: Settings) -> None:
    async with await _open_session(args, settings) as session:
        voice = resolve_voice(session.voices, args.voice)
        voice_id = voice.voice_id if voice else args.voice
        await session.synthesize_single(args.text, voice_id)
        filename, data = session.single_download()
        output = Path(args.output or filename)
        output.write_bytes(data)
        print(f"Saved {output} ({len(data):,} bytes)")


async def cmd_script(args: argparse.Namespace, settings: Settings) -> None:
    parsed = read_script_file(args.file)
    if not parsed:
        raise VoicecastError(f"Could not parse any lines from: {args.file}")

    assignments = _parse_voice_assignments(args.voice or [])

    async with await _open_session(args, settings) as session:
        session.dispatch(SetMode(ScriptMode.MULTIPLE))
        session.dispatch(ReplaceScript(tuple(parsed)))

        for speaker, name_or_id in assignments.items():
            voice = resolve_voice(session.voices, name_or_id)
            voice_id = voice.voice_id if voice else name_or_id
            line = next((ln for ln in session.lines if ln.speaker == speaker), None)
            if line is None:
                logger.warning(f"Speaker '{speaker}' does not appear in the script")
                continue
            session.dispatch(SetVoice(line.line_id, voice_id))

        unvoiced = sorted({ln.speaker for ln in session.lines if not ln.has_voice})
        if unvoiced:
            raise VoicecastError(
                f"Voice selection is required for all speakers: {', '.join(unvoiced)}"
            )

        print(f"Generating {len(session.lines)} lines...")
        report = await session.generate_all(concurrent=args.concurrent)

        if args.lines_dir:
            lines_dir = Path(args.lines_dir)
            lines_dir.mkdir(parents=True, exist_ok=True)
            for result in report.succeeded:
                filename, data = session.line_download(result.line_id)
                (lines_dir / f"{result.line_id:03d}_{filename}").write_bytes(data)

        if not report.ok:
            raise VoicecastError(report.summary())
        print(report.summary())

        merged = await session.merge()
        output = Path(args.output or merged.filename)
        output.write_bytes(merged.data)
        print(
            f"Saved {output} ({merged.duration_seconds:.1f}s, "
            f"{merged.sample_rate} Hz, {len(merged.data):,} bytes)"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voicecast",
        description="Convert text and multi-speaker scripts to speech with ElevenLabs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--api-key", help="ElevenLabs API key (overrides the stored key)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    login_parser = subparsers.add_parser("login", help="Validate and store an API key")
    login_parser.add_argument("api_key", help="ElevenLabs API key")
    login_parser.set_defaults(func=cmd_login)

    logout_parser = subparsers.add_parser("logout", help="Remove the stored API key")
    logout_parser.set_defaults(func=cmd_logout)

    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--filter", help="Filter by name, category or label")
    voices_parser.set_defaults(func=cmd_voices)

    usage_parser = subparsers.add_parser("usage", help="Show character quota usage")
    usage_parser.set_defaults(func=cmd_usage)

    model_choices = [m.value for m in SynthesisModel]

    say_parser = subparsers.add_parser("say", help="Synthesize one text with one voice")
    say_parser.add_argument("text", help="Text to speak")
    say_parser.add_argument("--voice", required=True, help="Voice ID or name")
    say_parser.add_argument("-o", "--output", help="Output file (default: audio.mp3)")
    say_parser.add_argument("--model", choices=model_choices)
    say_parser.add_argument("--emphasize", action="store_true", help="Upper-case the text")
    say_parser.set_defaults(func=cmd_say)

    script_parser = subparsers.add_parser("script", help="Generate and merge a speaker script")
    script_parser.add_argument("file", help="Script file with 'speaker: text' lines")
    script_parser.add_argument(
        "--voice", action="append", metavar="SPEAKER=VOICE",
        help="Voice ID or name for a speaker (repeatable)",
    )
    script_parser.add_argument("-o", "--output", help="Merged WAV file (default: merged_audio.wav)")
    script_parser.add_argument("--lines-dir", help="Also save each line's clip here")
    script_parser.add_argument("--model", choices=model_choices)
    script_parser.add_argument("--emphasize", action="store_true", help="Upper-case the text")
    script_parser.add_argument(
        "--concurrent", action="store_true",
        help="Synthesize lines concurrently instead of one at a time",
    )
    script_parser.set_defaults(func=cmd_script)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    settings = get_settings()
    configure_logging(settings, args.verbose)

    try:
        asyncio.run(args.func(args, settings))
    except VoicecastError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()

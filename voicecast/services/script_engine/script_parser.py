"""Parsing of uploaded ``speaker: text`` scripts."""

import logging
from pathlib import Path

from voicecast.exceptions import ScriptParseError
from voicecast.models import ParsedLine

logger = logging.getLogger(__name__)


def parse_script_text(text: str) -> list[ParsedLine]:
    """
    Parse a line-oriented script.

    Each non-blank line is ``speaker: text``. The first colon separates the
    speaker from the text; later colons stay in the text. A line without a
    colon is taken as a speaker with no text, and a line with nothing before
    the colon gets a ``Speaker N`` placeholder name.

    Args:
        text: Full script file contents

    Returns:
        Parsed lines in file order
    """
    parsed: list[ParsedLine] = []

    for number, raw in enumerate(text.splitlines(), start=1):
        if not raw.strip():
            continue

        speaker, _, body = raw.partition(":")
        speaker = speaker.strip()
        if not speaker:
            speaker = f"Speaker {len(parsed) + 1}"
            logger.warning(f"Line {number} has no speaker, using '{speaker}'")

        parsed.append(ParsedLine(speaker=speaker, text=body.strip(), source_line=number))

    logger.info(f"Parsed {len(parsed)} script lines")
    return parsed


def read_script_file(path: str | Path) -> list[ParsedLine]:
    """
    Read and parse a script file (UTF-8).

    Raises:
        ScriptParseError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ScriptParseError(
            message=f"Script file is not valid UTF-8: {path}",
            details={"file_path": str(path)},
            cause=e,
        )
    except OSError as e:
        raise ScriptParseError(
            message=f"Could not read script file: {e}",
            details={"file_path": str(path)},
            cause=e,
        )
    return parse_script_text(content)

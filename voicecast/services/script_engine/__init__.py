"""Script import, editing commands and state."""

from .script_parser import parse_script_text, read_script_file
from .script_state import (
    AddLine,
    ClearScript,
    Command,
    Regenerate,
    RemoveLine,
    ReplaceScript,
    ScriptReducer,
    ScriptState,
    SetMode,
    SetVoice,
    UpdateLine,
)

__all__ = [
    "AddLine",
    "ClearScript",
    "Command",
    "Regenerate",
    "RemoveLine",
    "ReplaceScript",
    "ScriptReducer",
    "ScriptState",
    "SetMode",
    "SetVoice",
    "UpdateLine",
    "parse_script_text",
    "read_script_file",
]

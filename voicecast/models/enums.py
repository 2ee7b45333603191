"""Enumeration types used across the client."""

from enum import Enum


class ScriptMode(str, Enum):
    """Generation mode: one text with one voice, or a multi-speaker script."""

    SINGLE = "single"
    MULTIPLE = "multiple"


class SynthesisModel(str, Enum):
    """ElevenLabs synthesis models offered to the user."""

    MULTILINGUAL_V2 = "eleven_multilingual_v2"  # best quality
    MONOLINGUAL_V1 = "eleven_monolingual_v1"  # faster


class SampleRatePolicy(str, Enum):
    """How the merge engine treats clips whose sample rates differ."""

    ACCEPT = "accept"  # append as-is, output uses the first clip's rate
    REJECT = "reject"


class UsageLevel(str, Enum):
    """Coarse quota consumption level."""

    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


class LineStatus(str, Enum):
    """Outcome of one line in a sequential generation run."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"

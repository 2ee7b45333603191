"""Synthesized clips owned by script lines."""

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass
class SynthesizedClip:
    """
    One encoded audio buffer produced for exactly one script line.

    The buffer is a scoped resource: it is released when the clip is
    superseded by a regeneration, when its line is removed, or when the
    session ends. A released clip no longer holds its bytes.
    """

    owner_key: str
    speaker: str
    buffer: Optional[bytes] = field(repr=False)
    encoding: str = "mp3"

    @property
    def released(self) -> bool:
        return self.buffer is None

    @property
    def data(self) -> bytes:
        if self.buffer is None:
            raise ValueError(f"Clip {self.owner_key} has already been released")
        return self.buffer

    @property
    def size(self) -> int:
        return 0 if self.buffer is None else len(self.buffer)

    def release(self) -> None:
        """Drop the encoded buffer."""
        self.buffer = None

    def snapshot(self) -> "SynthesizedClip":
        """Copy that keeps the bytes readable after this clip is released."""
        return replace(self, buffer=self.data)

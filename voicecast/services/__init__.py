"""Services for synthesis, script editing and audio merging."""

from .session import StudioSession

__all__ = ["StudioSession"]

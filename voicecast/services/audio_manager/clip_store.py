"""Ownership and lifecycle of synthesized clips."""

import logging
import threading
from collections.abc import Iterable, Sequence
from typing import Optional

from voicecast.models import SynthesizedClip

logger = logging.getLogger(__name__)


class ClipStore:
    """
    Maps owner keys to their single live clip.

    Every clip that leaves the store (superseded, removed, cleared) is
    released. Writes are serialized with a lock so concurrent synthesis
    variants can share one store.
    """

    def __init__(self):
        self._clips: dict[str, SynthesizedClip] = {}
        self._lock = threading.Lock()
        self.released_count = 0

    def __contains__(self, owner_key: str) -> bool:
        return owner_key in self._clips

    def __len__(self) -> int:
        return len(self._clips)

    def keys(self) -> list[str]:
        return list(self._clips)

    def get(self, owner_key: str) -> Optional[SynthesizedClip]:
        """Get the live clip for an owner key."""
        return self._clips.get(owner_key)

    def put(self, clip: SynthesizedClip) -> Optional[SynthesizedClip]:
        """
        Store a clip, releasing the one it supersedes.

        Returns:
            The superseded clip (already released), if there was one
        """
        with self._lock:
            previous = self._clips.get(clip.owner_key)
            self._clips[clip.owner_key] = clip
            if previous is not None and previous is not clip:
                self._release(previous)
            else:
                previous = None

        logger.debug(f"Stored clip {clip.owner_key} ({clip.size} bytes)")
        return previous

    def remove(self, owner_key: str) -> bool:
        """Release and forget the clip for one owner key."""
        with self._lock:
            clip = self._clips.pop(owner_key, None)
            if clip is None:
                return False
            self._release(clip)
        return True

    def remove_many(self, owner_keys: Iterable[str]) -> list[str]:
        """Release every listed clip that exists; return the keys released."""
        return [key for key in owner_keys if self.remove(key)]

    def retain(self, owner_keys: Iterable[str]) -> list[str]:
        """Release every clip whose key is not listed."""
        keep = set(owner_keys)
        stale = [key for key in self.keys() if key not in keep]
        return self.remove_many(stale)

    def clear(self) -> int:
        """Release all clips. Returns how many were released."""
        with self._lock:
            clips = list(self._clips.values())
            self._clips.clear()
            for clip in clips:
                self._release(clip)
        if clips:
            logger.info(f"Released {len(clips)} clips")
        return len(clips)

    def collect(self, owner_keys: Sequence[str]) -> list[SynthesizedClip]:
        """
        Snapshot clips in the given order.

        The snapshots are taken under the lock and stay readable if the
        stored clips are released afterwards.

        Raises:
            KeyError: If any key has no live clip
        """
        with self._lock:
            return [self._clips[key].snapshot() for key in owner_keys]

    def _release(self, clip: SynthesizedClip) -> None:
        clip.release()
        self.released_count += 1

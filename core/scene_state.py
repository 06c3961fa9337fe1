"""Scene state shared between fetch workers and the render loop.

Fetch threads append entries at any time; the render loop calls
``begin_frame()`` once per tick, which publishes everything appended
since the previous frame in append order. An entry appended during
frame N is therefore first visible in frame N + 1.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EntryKind(Enum):
    PLANET = "planet"
    MOON = "moon"
    ASTEROID = "asteroid"


@dataclass(frozen=True, slots=True)
class SceneEntry:
    """One body waiting for (or already given) scene objects."""

    kind: EntryKind
    key: str
    body: Any


class SceneState:
    """Append-only, frame-synchronised collection of scene entries."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: list[SceneEntry] = []
        self._visible: list[SceneEntry] = []
        self._keys: set[str] = set()
        self._frame: int = 0

    def append(self, entry: SceneEntry) -> bool:
        """Queue an entry for the next frame. Thread-safe.

        Returns False (and drops the entry) if its key was seen before.
        """
        with self._lock:
            if entry.key in self._keys:
                logger.debug("Ignoring duplicate scene entry %s", entry.key)
                return False
            self._keys.add(entry.key)
            self._pending.append(entry)
            return True

    def extend(self, entries: list[SceneEntry]) -> int:
        """Append several entries; returns how many were accepted."""
        return sum(1 for entry in entries if self.append(entry))

    def begin_frame(self) -> list[SceneEntry]:
        """Publish pending entries. Called by the render loop only.

        Returns:
            The entries that became visible with this frame.
        """
        with self._lock:
            self._frame += 1
            published = self._pending
            self._pending = []
            self._visible.extend(published)
        if published:
            logger.debug(
                "Frame %d: %d new scene entries", self._frame, len(published)
            )
        return published

    @property
    def entries(self) -> tuple[SceneEntry, ...]:
        """Snapshot of visible entries, in append order."""
        with self._lock:
            return tuple(self._visible)

    def by_kind(self, kind: EntryKind) -> list[SceneEntry]:
        return [entry for entry in self.entries if entry.kind == kind]

    @property
    def frame(self) -> int:
        return self._frame

    def __len__(self) -> int:
        with self._lock:
            return len(self._visible)

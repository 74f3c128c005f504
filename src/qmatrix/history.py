"""
Bounded linear undo/redo log of composition snapshots.

Recording after an undo discards every entry ahead of the pointer, and the
oldest entry is evicted once the log grows past ``capacity``.
"""

from __future__ import annotations

from typing import Optional

from qmatrix.config import DEFAULT_HISTORY_CAPACITY
from qmatrix.engine import CompositionState
from qmatrix.logging import get_logger

logger = get_logger(__name__)


class HistoryManager:
    """
    Undo/redo log.

    Parameters
    ----------
    capacity : int
        Maximum number of snapshots kept (at least 1).
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: list[CompositionState] = []
        self._index = -1

    @property
    def entries(self) -> list[CompositionState]:
        return list(self._entries)

    @property
    def index(self) -> int:
        """Position of the current entry, -1 when empty."""
        return self._index

    @property
    def current(self) -> Optional[CompositionState]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, entry: CompositionState) -> None:
        """Append ``entry`` as the new current snapshot."""
        discarded = len(self._entries) - (self._index + 1)
        if discarded:
            logger.debug("discarding %d redo entries", discarded)
            del self._entries[self._index + 1:]

        self._entries.append(entry)
        if len(self._entries) > self.capacity:
            self._entries.pop(0)
            logger.debug("history full (%d), evicted oldest entry", self.capacity)
        self._index = len(self._entries) - 1

    def undo(self) -> Optional[CompositionState]:
        """Step back one entry. Returns ``None`` at the first entry."""
        if not self.can_undo:
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> Optional[CompositionState]:
        """Step forward one entry. Returns ``None`` at the last entry."""
        if not self.can_redo:
            return None
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1

    def __repr__(self) -> str:
        return f"HistoryManager(entries={len(self)}, index={self._index}, capacity={self.capacity})"

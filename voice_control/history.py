"""Bounded, newest-first record of recently executed transcripts."""

from __future__ import annotations

from collections import deque

from .models import CommandHistoryEntry

DEFAULT_HISTORY_CAPACITY = 10


class CommandHistory:
    """Fixed-capacity FIFO: push to the front, oldest entry falls off the back."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: deque[CommandHistoryEntry] = deque(maxlen=capacity)

    def push(self, entry: CommandHistoryEntry) -> None:
        # appendleft on a full deque discards from the right
        self._entries.appendleft(entry)

    def snapshot(self) -> list[CommandHistoryEntry]:
        """Copy of the entries, newest first. Mutating it leaves the buffer alone."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

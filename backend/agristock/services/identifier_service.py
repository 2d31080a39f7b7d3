# Overview: Allocation of record ids for stock items and sales.

from __future__ import annotations

import threading
import time
from typing import Callable, Iterable


def _clock_ms() -> int:
    return time.time_ns() // 1_000_000


class RecordIdAllocator:
    """
    Issues ids as decimal strings of the millisecond clock.

    Ids are strictly increasing within a session even when two records are
    created in the same millisecond, and never collide with ids already
    loaded from storage. One allocator is shared by both ledgers.
    """

    def __init__(self, clock: Callable[[], int] = _clock_ms):
        self._lock = threading.Lock()
        self._clock = clock
        self._last = 0

    def observe(self, ids: Iterable[str]) -> None:
        """Move the floor past any numeric ids already in use."""
        with self._lock:
            for value in ids:
                try:
                    number = int(value)
                except (TypeError, ValueError):
                    continue
                if number > self._last:
                    self._last = number

    def next_id(self) -> str:
        with self._lock:
            candidate = self._clock()
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)

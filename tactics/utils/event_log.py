"""Thread-safe narration log for encounter events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CombatEvent:
    """A single narrated line, stamped with the round it happened in."""

    seq: int
    round: int
    message: str


class EventLog:
    """Unbounded narration log.  Writers append; readers snapshot a slice.

    Thread-safe via a simple lock: the API may read while a request on
    another worker thread is resolving an action.
    """

    __slots__ = ("_buffer", "_lock", "_seq")

    def __init__(self) -> None:
        self._buffer: deque[CombatEvent] = deque()
        self._lock = threading.Lock()
        self._seq = 0

    def append(self, round_number: int, message: str) -> CombatEvent:
        with self._lock:
            event = CombatEvent(seq=self._seq, round=round_number, message=message)
            self._seq += 1
            self._buffer.append(event)
            return event

    def since(self, seq: int) -> list[CombatEvent]:
        """Return all events with sequence number >= *seq*."""
        with self._lock:
            return [e for e in self._buffer if e.seq >= seq]

    def latest(self, count: int = 50) -> list[CombatEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
            self._seq = 0

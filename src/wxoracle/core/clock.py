from __future__ import annotations

import threading
import time
from typing import Protocol


class SequenceSource(Protocol):
    """Trusted ordering source supplied by the execution environment.

    The registry draws submission timestamps from here instead of reading the
    wall clock itself (think block height on a ledger).
    """

    def next_timestamp(self) -> int:
        ...


class MonotonicSequence:
    """Strictly increasing integer sequence: start, start + step, ..."""

    def __init__(self, start: int = 1, step: int = 1) -> None:
        if int(step) <= 0:
            raise ValueError("step must be a positive integer")
        self._lock = threading.Lock()
        self._next = int(start)
        self._step = int(step)

    def next_timestamp(self) -> int:
        with self._lock:
            value = self._next
            self._next += self._step
            return value

    def peek(self) -> int:
        with self._lock:
            return self._next


class WallClock:
    """Millisecond wall-clock timestamps.

    Successive calls within the same millisecond return the same value, so
    pair this with `CollisionPolicy.REJECT` if duplicates must not be served.
    """

    def next_timestamp(self) -> int:
        return int(time.time() * 1000)

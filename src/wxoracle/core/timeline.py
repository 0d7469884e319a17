from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import Generic, TypeVar


T = TypeVar("T")


@dataclass
class LocationSeries(Generic[T]):
    """Timestamp-ordered samples for a single location.

    `timestamps` stays sorted so the latest sample is always the last entry and
    exact/as-of lookups are a bisect rather than a scan.
    """

    timestamps: list[int] = field(default_factory=list)
    samples: list[T] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.timestamps)

    def contains(self, timestamp: int) -> bool:
        idx = bisect_left(self.timestamps, timestamp)
        return idx < len(self.timestamps) and self.timestamps[idx] == timestamp

    def set_sample(self, timestamp: int, value: T) -> bool:
        """Insert `value` at `timestamp`, replacing any sample already there.

        Returns True if an existing sample was replaced.
        """
        ts = int(timestamp)
        idx = bisect_left(self.timestamps, ts)
        if idx < len(self.timestamps) and self.timestamps[idx] == ts:
            self.samples[idx] = value
            return True
        self.timestamps.insert(idx, ts)
        self.samples.insert(idx, value)
        return False

    def exact(self, timestamp: int) -> T | None:
        idx = bisect_left(self.timestamps, timestamp)
        if idx < len(self.timestamps) and self.timestamps[idx] == timestamp:
            return self.samples[idx]
        return None

    def as_of(self, timestamp: int) -> T | None:
        idx = bisect_right(self.timestamps, timestamp) - 1
        if idx >= 0:
            return self.samples[idx]
        return None

    def latest(self) -> T | None:
        if self.samples:
            return self.samples[-1]
        return None

    def window(self, *, start: int | None = None, end: int | None = None) -> list[T]:
        lo = 0 if start is None else bisect_left(self.timestamps, start)
        hi = len(self.timestamps) if end is None else bisect_right(self.timestamps, end)
        return list(self.samples[lo:hi])

    def bounds(self) -> tuple[int, int] | None:
        if not self.timestamps:
            return None
        return self.timestamps[0], self.timestamps[-1]

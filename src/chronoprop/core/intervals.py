"""Time intervals and ordered, non-overlapping interval collections.

Times are absolute seconds (``float``); ``-inf``/``+inf`` mark unbounded
ends.  Each :class:`TimeInterval` carries an opaque ``data`` payload which,
inside a :class:`~chronoprop.core.property.DynamicProperty`, is the
interval's :class:`~chronoprop.core.samples.SampleTable`.
"""

from __future__ import annotations

import math
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from ..utils.timeparse import parse_iso8601


@dataclass
class TimeInterval:
    """A time range with independent inclusivity flags on each boundary."""

    start: float
    stop: float
    is_start_included: bool = True
    is_stop_included: bool = True
    data: Any = None

    def __post_init__(self) -> None:
        if math.isnan(self.start) or math.isnan(self.stop):
            raise ValueError("interval bounds must not be NaN")
        if self.start > self.stop:
            raise ValueError(f"interval start {self.start} is after stop {self.stop}")

    @classmethod
    def infinite(cls, data: Any = None) -> "TimeInterval":
        """Return the closed interval covering all of time."""

        return cls(-math.inf, math.inf, True, True, data)

    @property
    def is_empty(self) -> bool:
        """``True`` when no instant satisfies :meth:`contains`."""

        if self.start == self.stop:
            return not (self.is_start_included and self.is_stop_included)
        return False

    @property
    def duration(self) -> float:
        return self.stop - self.start

    def contains(self, t: float) -> bool:
        """Return ``True`` if ``t`` lies within the interval."""

        after_start = t > self.start or (t == self.start and self.is_start_included)
        before_stop = t < self.stop or (t == self.stop and self.is_stop_included)
        return after_start and before_stop

    def same_bounds(self, other: "TimeInterval") -> bool:
        return (
            self.start == other.start
            and self.stop == other.stop
            and self.is_start_included == other.is_start_included
            and self.is_stop_included == other.is_stop_included
        )

    def intersect(self, other: "TimeInterval") -> Optional["TimeInterval"]:
        """Return the overlap of ``self`` and ``other`` or ``None``.

        The result keeps the payload of ``self``.
        """

        if self.start > other.start:
            start, start_included = self.start, self.is_start_included
        elif other.start > self.start:
            start, start_included = other.start, other.is_start_included
        else:
            start = self.start
            start_included = self.is_start_included and other.is_start_included

        if self.stop < other.stop:
            stop, stop_included = self.stop, self.is_stop_included
        elif other.stop < self.stop:
            stop, stop_included = other.stop, other.is_stop_included
        else:
            stop = self.stop
            stop_included = self.is_stop_included and other.is_stop_included

        if start > stop:
            return None
        result = TimeInterval(start, stop, start_included, stop_included, self.data)
        if result.is_empty:
            return None
        return result


def parse_iso8601_interval(text: str, data: Any = None) -> TimeInterval:
    """Build a closed :class:`TimeInterval` from ``"<start>/<stop>"``.

    ``ValueError`` is raised when either side is not an ISO-8601 timestamp or
    when the bounds are reversed.
    """

    if not isinstance(text, str):
        raise ValueError(f"interval must be a string, got {type(text).__name__}")
    parts = text.split("/")
    if len(parts) != 2:
        raise ValueError(f"Unrecognised interval: {text!r}")
    start = parse_iso8601(parts[0])
    stop = parse_iso8601(parts[1])
    return TimeInterval(start, stop, True, True, data)


def _overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    return a.intersect(b) is not None


class TimeIntervalCollection:
    """Ordered, pairwise non-overlapping set of :class:`TimeInterval` objects.

    Intervals are kept sorted by ``start``.  Adjacent intervals may share a
    boundary instant as long as at most one of them includes it.
    """

    def __init__(self) -> None:
        self._intervals: List[TimeInterval] = []
        self._starts: List[float] = []

    def __len__(self) -> int:
        return len(self._intervals)

    def __iter__(self) -> Iterator[TimeInterval]:
        return iter(self._intervals)

    def __getitem__(self, index: int) -> TimeInterval:
        return self._intervals[index]

    @property
    def is_empty(self) -> bool:
        return not self._intervals

    @property
    def start(self) -> Optional[float]:
        return self._intervals[0].start if self._intervals else None

    @property
    def stop(self) -> Optional[float]:
        return self._intervals[-1].stop if self._intervals else None

    def find_interval_containing(self, t: float) -> Optional[TimeInterval]:
        """Return the unique interval containing ``t`` or ``None``."""

        index = bisect_right(self._starts, t) - 1
        # An excluded start at ``t`` hands the instant to the previous interval.
        for candidate in (index, index - 1):
            if candidate < 0:
                break
            interval = self._intervals[candidate]
            if interval.contains(t):
                return interval
            if interval.start < t:
                break
        return None

    def contains(self, t: float) -> bool:
        return self.find_interval_containing(t) is not None

    def find_interval(
        self,
        start: float,
        stop: float,
        is_start_included: Optional[bool] = None,
        is_stop_included: Optional[bool] = None,
    ) -> Optional[TimeInterval]:
        """Return the interval with exactly these bounds or ``None``.

        Inclusivity flags are compared only when given.
        """

        index = bisect_left(self._starts, start)
        while index < len(self._intervals) and self._starts[index] == start:
            interval = self._intervals[index]
            if (
                interval.stop == stop
                and (is_start_included is None or interval.is_start_included == is_start_included)
                and (is_stop_included is None or interval.is_stop_included == is_stop_included)
            ):
                return interval
            index += 1
        return None

    def add_interval(self, interval: TimeInterval) -> TimeInterval:
        """Insert ``interval`` at its sorted position and return the stored one.

        An existing interval with identical bounds takes over the new payload.
        Empty intervals are ignored.  ``ValueError`` is raised if ``interval``
        overlaps a different member.
        """

        if interval.is_empty:
            return interval

        existing = self.find_interval(
            interval.start, interval.stop, interval.is_start_included, interval.is_stop_included
        )
        if existing is not None:
            existing.data = interval.data
            return existing

        index = bisect_right(self._starts, interval.start)
        # [a, a] sorts before (a, b]
        while (
            index > 0
            and self._starts[index - 1] == interval.start
            and interval.is_start_included
            and not self._intervals[index - 1].is_start_included
        ):
            index -= 1
        # Sorted by start and non-overlapping, so only the neighbours can clash.
        for neighbour in self._intervals[max(index - 1, 0) : index + 1]:
            if _overlaps(neighbour, interval):
                raise ValueError(
                    f"interval [{interval.start}, {interval.stop}] overlaps "
                    f"[{neighbour.start}, {neighbour.stop}]"
                )
        self._intervals.insert(index, interval)
        self._starts.insert(index, interval.start)
        return interval

    def intersect(self, interval: TimeInterval) -> "TimeIntervalCollection":
        """Return a new collection with every member clipped to ``interval``."""

        result = TimeIntervalCollection()
        for member in self._intervals:
            clipped = member.intersect(interval)
            if clipped is not None:
                result.add_interval(clipped)
        return result


__all__ = [
    "TimeInterval",
    "TimeIntervalCollection",
    "parse_iso8601_interval",
]

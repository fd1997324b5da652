"""Custom exception hierarchy for chronoprop."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple


class ChronopropError(Exception):
    """Base exception for all chronoprop errors."""


class MalformedPacketError(ChronopropError, ValueError):
    """A packet could not be applied; no table was modified."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        self.field = field
        if field is not None:
            message = f"{field}: {message}"
        super().__init__(message)


class UnknownAlgorithmError(ChronopropError, ValueError):
    """An interpolation algorithm name is not one of the built-in strategies."""

    def __init__(self, name: object, known: Sequence[str] = ()) -> None:
        self.name = name
        message = f"Unknown interpolation algorithm {name!r}"
        if known:
            message += "; expected one of: " + ", ".join(repr(k) for k in known)
        super().__init__(message)


RejectedSample = Tuple[int, object, Tuple[object, ...]]


class InvalidSampleError(ChronopropError, ValueError):
    """One or more samples of a batch carried non-finite numbers.

    The rest of the batch has already been merged when this is raised.
    ``rejected`` holds ``(position, time, values)`` for every dropped entry,
    ``position`` being the entry's ordinal within the batch.
    """

    def __init__(self, rejected: Sequence[RejectedSample]) -> None:
        self.rejected = list(rejected)
        positions = ", ".join(str(item[0]) for item in self.rejected)
        super().__init__(f"rejected {len(self.rejected)} invalid sample(s) at batch position(s) {positions}")

"""Merge batches of time-tagged samples into a sorted sample series.

A batch is a flat sequence ``[time_0, v0_0..v0_{W-1}, time_1, ...]`` where
``W`` is the value width.  Each time designator is either an ISO-8601 string
or a number of seconds relative to an epoch.  The target ``times``/``values``
lists are updated in place and stay strictly increasing and duplicate free
without ever being re-sorted.
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Callable, List, Optional, Sequence, Tuple

from ..errors import InvalidSampleError, MalformedPacketError, RejectedSample
from ..utils.search import binary_search
from ..utils.timeparse import parse_iso8601

logger = logging.getLogger(__name__)

Sample = Tuple[float, List[float]]
SampleValidator = Callable[[Sequence[float]], bool]


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def resolve_time(designator: object, epoch: Optional[float]) -> float:
    """Turn a sample time designator into absolute seconds."""

    if isinstance(designator, str):
        try:
            return parse_iso8601(designator)
        except ValueError as exc:
            raise MalformedPacketError(str(exc), field="time") from exc
    if _is_number(designator):
        if epoch is None:
            raise MalformedPacketError("relative sample time requires an epoch", field="epoch")
        return epoch + float(designator)
    raise MalformedPacketError(f"unsupported time designator {designator!r}", field="time")


def decode_samples(
    new_data: Sequence[object],
    doubles_per_value: int,
    epoch: Optional[float] = None,
    validate: Optional[SampleValidator] = None,
) -> Tuple[List[Sample], List[RejectedSample]]:
    """Split a flat batch into ``(time, values)`` pairs.

    Returns the accepted samples in arrival order and the rejected ones.
    Entries whose time or values are not finite, or that ``validate``
    refuses, are rejected; structural problems raise
    :class:`MalformedPacketError` before anything is returned.
    """

    stride = doubles_per_value + 1
    if len(new_data) % stride:
        raise MalformedPacketError(
            f"sample batch of length {len(new_data)} is not a multiple of {stride}",
            field="samples",
        )

    samples: List[Sample] = []
    rejected: List[RejectedSample] = []
    for position, offset in enumerate(range(0, len(new_data), stride)):
        designator = new_data[offset]
        raw_values = new_data[offset + 1 : offset + stride]
        if not all(_is_number(v) for v in raw_values):
            raise MalformedPacketError(f"non-numeric sample value in {list(raw_values)!r}", field="samples")

        time = resolve_time(designator, epoch)
        values = [float(v) for v in raw_values]
        if not math.isfinite(time) or not all(math.isfinite(v) for v in values):
            rejected.append((position, designator, tuple(raw_values)))
            continue
        if validate is not None and not validate(values):
            rejected.append((position, designator, tuple(raw_values)))
            continue
        samples.append((time, values))
    return samples, rejected


def merge_decoded(
    times: List[float],
    values: List[float],
    samples: Sequence[Sample],
    doubles_per_value: int,
) -> int:
    """Merge decoded samples into ``times``/``values`` in place.

    Exact time matches overwrite the stored value.  Otherwise a contiguous
    run is collected at the insertion point for as long as each candidate is
    strictly after the previous run entry and strictly before the time that
    occupied the insertion slot, then spliced in with one slice assignment.

    Returns the number of newly inserted times.
    """

    width = doubles_per_value
    inserted = 0
    i = 0
    n = len(samples)
    while i < n:
        time, sample_values = samples[i]
        index = binary_search(times, time)

        if index >= 0:
            start = index * width
            values[start : start + width] = sample_values
            i += 1
            continue

        insertion_point = ~index
        next_time = times[insertion_point] if insertion_point < len(times) else None
        run_times: List[float] = []
        run_values: List[float] = []
        previous: Optional[float] = None
        while i < n:
            time, sample_values = samples[i]
            if (previous is not None and time <= previous) or (next_time is not None and time >= next_time):
                break
            run_times.append(time)
            run_values.extend(sample_values)
            previous = time
            i += 1

        values[insertion_point * width : insertion_point * width] = run_values
        times[insertion_point:insertion_point] = run_times
        inserted += len(run_times)
    return inserted


def merge_samples(
    epoch: Optional[float],
    times: List[float],
    values: List[float],
    new_data: Sequence[object],
    doubles_per_value: int,
    validate: Optional[SampleValidator] = None,
) -> int:
    """Decode ``new_data`` and merge it into ``times``/``values``.

    Returns the number of newly inserted times.

    Raises
    ------
    MalformedPacketError
        If the batch is structurally invalid.  Nothing is merged.
    InvalidSampleError
        After merging, if any entry carried a non-finite time or value or
        was refused by ``validate``.
    """

    samples, rejected = decode_samples(new_data, doubles_per_value, epoch, validate)
    inserted = merge_decoded(times, values, samples, doubles_per_value)
    logger.debug(
        "merged %d sample(s): %d inserted, %d overwritten, %d rejected",
        len(samples),
        inserted,
        len(samples) - inserted,
        len(rejected),
    )
    if rejected:
        raise InvalidSampleError(rejected)
    return inserted


__all__ = ["resolve_time", "decode_samples", "merge_decoded", "merge_samples"]

"""Utilities for parsing time stamps and human friendly durations.

Every absolute time handled by chronoprop is a ``float`` counting seconds
since the Unix epoch (UTC).  ``-inf`` and ``+inf`` stand for unbounded
interval ends.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Union

TimeLike = Union[float, int, datetime, str]

ISO_RE = re.compile(
    r"^\s*\d{4}-\d{2}-\d{2}(?:[T\s]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?\s*$"
)


def parse_iso8601(text: str) -> float:
    """Parse an ISO-8601 timestamp into seconds since the Unix epoch.

    Naive timestamps are interpreted as UTC.  ``ValueError`` is raised on
    malformed input.
    """

    if not isinstance(text, str) or not ISO_RE.match(text):
        raise ValueError(f"Unrecognised timestamp: {text!r}")
    stamp = text.strip().replace("Z", "+00:00")
    # Fractions longer than microseconds are not accepted by ``fromisoformat``
    stamp = re.sub(r"(\.\d{6})\d+", r"\1", stamp)
    try:
        dt = datetime.fromisoformat(stamp)
    except ValueError as exc:
        raise ValueError(f"Unrecognised timestamp: {text!r}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def to_seconds(value: TimeLike) -> float:
    """Coerce ``value`` to absolute seconds.

    Numbers are taken as seconds already, ``datetime`` objects are converted
    (naive ones as UTC) and strings are parsed as ISO-8601.
    """

    if isinstance(value, bool):
        raise TypeError("booleans are not time values")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    if isinstance(value, str):
        return parse_iso8601(value)
    raise TypeError(f"unsupported time value: {value!r}")


def format_seconds(seconds: float) -> str:
    """Render ``seconds`` as an ISO-8601 UTC string (``Z`` suffix)."""

    if math.isinf(seconds):
        return "-inf" if seconds < 0 else "+inf"
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


def parse_duration(text: str) -> float:
    """Parse ``text`` as a duration in seconds.

    Accepted formats are:

    * ``HH:MM:SS``
    * ``MM:SS``
    * ``SS``

    Fractional seconds are supported.  ``ValueError`` is raised on
    malformed input.
    """

    parts = text.strip().split(":")
    try:
        parts_f = [float(p) for p in parts]
    except ValueError as exc:
        raise ValueError(f"invalid duration: {text!r}") from exc

    if len(parts_f) == 1:
        seconds = parts_f[0]
    elif len(parts_f) == 2:
        minutes, seconds = parts_f
        seconds += minutes * 60
    elif len(parts_f) == 3:
        hours, minutes, seconds = parts_f
        seconds += minutes * 60 + hours * 3600
    else:
        raise ValueError("too many components in duration string")
    return seconds

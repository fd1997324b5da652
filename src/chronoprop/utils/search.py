"""Binary search over sorted sequences."""

from __future__ import annotations

from bisect import bisect_left
from typing import Sequence


def binary_search(items: Sequence[float], value: float) -> int:
    """Return the index of ``value`` in the sorted ``items``.

    When ``value`` is absent the bitwise complement of its insertion point is
    returned, so the result is negative and ``~result`` gives the slot where
    ``value`` would keep ``items`` sorted.
    """

    index = bisect_left(items, value)
    if index < len(items) and items[index] == value:
        return index
    return ~index

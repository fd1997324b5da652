"""Typed values returned by property queries.

These are small immutable containers; packed numeric storage lives in the
sample tables and is converted by the value-type adapters.
"""

from __future__ import annotations

import math
from dataclasses import astuple, dataclass
from typing import Iterator


@dataclass(frozen=True)
class Cartesian3:
    """A 3-D vector (for example an Earth-fixed position in metres)."""

    x: float
    y: float
    z: float

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


@dataclass(frozen=True)
class Quaternion:
    """A rotation quaternion stored scalar-last, ``(x, y, z, w)``."""

    x: float
    y: float
    z: float
    w: float

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))

    @property
    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w)


@dataclass(frozen=True)
class Color:
    """An RGBA colour with components in ``[0, 1]``."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))

    def to_bytes(self) -> tuple[int, int, int, int]:
        """Return the colour as 8-bit ``(r, g, b, a)`` components."""

        return tuple(int(round(min(max(c, 0.0), 1.0) * 255)) for c in self)  # type: ignore[return-value]

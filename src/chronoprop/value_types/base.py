"""Value-type adapter interface.

A value type converts between the wire representation of a property and its
typed value, and decides how samples are packed for interpolation.  Value
types are stateless; one instance per kind is shared by every property of
that kind.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from numbers import Real
from typing import Any, Generic, List, Mapping, Sequence, Tuple, TypeVar

import numpy as np

from ..errors import MalformedPacketError

T = TypeVar("T")


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class ValueType(ABC, Generic[T]):
    """Base class for the closed set of value-type adapters.

    Subclasses set ``name``, ``wire_fields``, ``doubles_per_value`` and
    ``doubles_per_interpolation_value`` and implement :meth:`create_value_from_array`.
    The defaults below cover types whose interpolation space equals their
    storage space.
    """

    name: str
    wire_fields: Tuple[str, ...]
    doubles_per_value: int
    doubles_per_interpolation_value: int

    def unwrap_interval(self, packet: Any) -> Any:
        """Extract the raw constant or flat sample list from ``packet``.

        ``packet`` may be a mapping carrying one of :attr:`wire_fields` or the
        raw value itself.
        """

        if isinstance(packet, Mapping):
            for key in self.wire_fields:
                if key in packet:
                    return packet[key]
            raise MalformedPacketError(
                f"packet has none of the fields {', '.join(self.wire_fields)}", field=self.name
            )
        return packet

    def is_sampled(self, raw: Any) -> bool:
        """``True`` when ``raw`` is a time-tagged sample list."""

        return isinstance(raw, (list, tuple)) and len(raw) > self.doubles_per_value

    def pack_constant(self, raw: Any) -> Tuple[float, ...]:
        """Validate a constant wire value and return it as packed numbers."""

        items = list(raw) if isinstance(raw, (list, tuple)) else [raw]
        if len(items) != self.doubles_per_value or not all(_is_number(v) for v in items):
            raise MalformedPacketError(
                f"expected {self.doubles_per_value} number(s), got {raw!r}", field=self.name
            )
        packed = tuple(float(v) for v in items)
        if not all(math.isfinite(v) for v in packed):
            raise MalformedPacketError(f"non-finite constant {raw!r}", field=self.name)
        return packed

    def create_value(self, raw: Any) -> T:
        """Build the typed value from a constant (wire or packed form)."""

        return self.create_value_from_array(self.pack_constant(raw), 0)

    def validate_sample(self, values: Sequence[float]) -> bool:
        """``True`` when one decoded sample can be stored and interpolated."""

        return True

    @abstractmethod
    def create_value_from_array(self, values: Sequence[float], offset: int) -> T:
        """Build the typed value stored at ``values[offset:offset + doubles_per_value]``."""

    def pack_values_for_interpolation(
        self,
        values: Sequence[float],
        y_table: np.ndarray,
        first_index: int,
        last_index: int,
    ) -> None:
        """Copy samples ``first_index..last_index`` into ``y_table``."""

        width = self.doubles_per_value
        window = values[first_index * width : (last_index + 1) * width]
        y_table[: len(window)] = window

    def create_value_from_interpolation_result(
        self,
        result: np.ndarray,
        values: Sequence[float],
        first_index: int,
        last_index: int,
    ) -> T:
        """Convert a raw interpolation result into the typed value."""

        return self.create_value_from_array(result, 0)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def scale_samples(raw: Sequence[Any], width: int, divisor: float) -> List[Any]:
    """Divide the values of a flat ``[time, v.., time, v..]`` list by ``divisor``.

    Time designators are passed through untouched.
    """

    out: List[Any] = []
    stride = width + 1
    for offset in range(0, len(raw), stride):
        out.append(raw[offset])
        for v in raw[offset + 1 : offset + stride]:
            out.append(v / divisor if _is_number(v) else v)
    return out


__all__ = ["ValueType", "scale_samples"]

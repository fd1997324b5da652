"""RGBA colour properties.

Colours arrive either as ``rgbaf`` (floats in ``[0, 1]``) or ``rgba``
(integers in ``[0, 255]``); the latter are scaled on unwrap so storage and
interpolation always work on floats.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Sequence

from ..errors import MalformedPacketError
from ..types import Color
from .base import ValueType, _is_number, scale_samples

_BYTE_MAX = 255.0


class ColorValueType(ValueType[Color]):
    """Four floats per sample: red, green, blue, alpha."""

    name = "color"
    wire_fields = ("rgbaf", "rgba")
    doubles_per_value = 4
    doubles_per_interpolation_value = 4

    def unwrap_interval(self, packet: Any) -> Any:
        if isinstance(packet, Mapping) and "rgbaf" not in packet and "rgba" in packet:
            raw = packet["rgba"]
            if not isinstance(raw, (list, tuple)):
                raise MalformedPacketError(f"rgba must be a list, got {raw!r}", field=self.name)
            if len(raw) == self.doubles_per_value:
                return [v / _BYTE_MAX if _is_number(v) else v for v in raw]
            return scale_samples(raw, self.doubles_per_value, _BYTE_MAX)
        return super().unwrap_interval(packet)

    def create_value_from_array(self, values: Sequence[float], offset: int) -> Color:
        return Color(
            float(values[offset]),
            float(values[offset + 1]),
            float(values[offset + 2]),
            float(values[offset + 3]),
        )

"""Scalar number properties (scale, width, ...)."""

from __future__ import annotations

from typing import Sequence

from .base import ValueType


class NumberValueType(ValueType[float]):
    """A single ``float`` per sample, read from the ``number`` field."""

    name = "number"
    wire_fields = ("number",)
    doubles_per_value = 1
    doubles_per_interpolation_value = 1

    def create_value_from_array(self, values: Sequence[float], offset: int) -> float:
        return float(values[offset])

"""Cartesian vector properties such as positions."""

from __future__ import annotations

from typing import Sequence

from ..types import Cartesian3
from .base import ValueType


class Cartesian3ValueType(ValueType[Cartesian3]):
    """Three numbers per sample, read from the ``cartesian`` field."""

    name = "cartesian3"
    wire_fields = ("cartesian",)
    doubles_per_value = 3
    doubles_per_interpolation_value = 3

    def create_value_from_array(self, values: Sequence[float], offset: int) -> Cartesian3:
        return Cartesian3(float(values[offset]), float(values[offset + 1]), float(values[offset + 2]))

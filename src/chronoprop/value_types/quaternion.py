"""Unit quaternion (orientation) properties.

Quaternions are stored as four numbers but interpolated as three: each
window sample is expressed as a rotation vector relative to the window's last
sample, the vectors are interpolated, and the result is composed back onto
that last sample.  This keeps interpolated orientations on the unit sphere.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from ..errors import MalformedPacketError
from ..types import Quaternion
from .base import ValueType


class UnitQuaternionValueType(ValueType[Quaternion]):
    """Scalar-last ``(x, y, z, w)`` quaternions from the ``unitQuaternion`` field."""

    name = "unit_quaternion"
    wire_fields = ("unitQuaternion",)
    doubles_per_value = 4
    doubles_per_interpolation_value = 3

    def create_value(self, raw: Any) -> Quaternion:
        packed = np.asarray(self.pack_constant(raw), dtype=float)
        norm = np.linalg.norm(packed)
        if norm == 0.0:
            raise MalformedPacketError("zero-length quaternion", field=self.name)
        return self.create_value_from_array(packed / norm, 0)

    def validate_sample(self, values: Sequence[float]) -> bool:
        # Rotation cannot be built from a zero quaternion
        return bool(np.linalg.norm(values) > 0.0)

    def create_value_from_array(self, values: Sequence[float], offset: int) -> Quaternion:
        return Quaternion(
            float(values[offset]),
            float(values[offset + 1]),
            float(values[offset + 2]),
            float(values[offset + 3]),
        )

    def pack_values_for_interpolation(self, values, y_table, first_index, last_index):
        quats = np.asarray(values[first_index * 4 : (last_index + 1) * 4], dtype=float).reshape(-1, 4)
        last = Rotation.from_quat(quats[-1])
        rotation_vectors = (Rotation.from_quat(quats) * last.inv()).as_rotvec()
        y_table[: rotation_vectors.size] = rotation_vectors.ravel()

    def create_value_from_interpolation_result(self, result, values, first_index, last_index):
        last = Rotation.from_quat(np.asarray(values[last_index * 4 : (last_index + 1) * 4], dtype=float))
        rotation = Rotation.from_rotvec(np.asarray(result, dtype=float)[:3]) * last
        return self.create_value_from_array(rotation.as_quat(), 0)

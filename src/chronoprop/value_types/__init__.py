"""Value-type adapters for dynamic properties.

The set of adapters is closed: :data:`VALUE_TYPES` maps every
:class:`ValueKind` to the single shared adapter instance for that kind.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Mapping, Union

from .base import ValueType
from .cartesian import Cartesian3ValueType
from .color import ColorValueType
from .number import NumberValueType
from .quaternion import UnitQuaternionValueType


class ValueKind(str, enum.Enum):
    """Kinds of value a dynamic property can hold."""

    NUMBER = "number"
    CARTESIAN3 = "cartesian3"
    COLOR = "color"
    UNIT_QUATERNION = "unit_quaternion"


VALUE_TYPES: Mapping[ValueKind, ValueType] = MappingProxyType(
    {
        ValueKind.NUMBER: NumberValueType(),
        ValueKind.CARTESIAN3: Cartesian3ValueType(),
        ValueKind.COLOR: ColorValueType(),
        ValueKind.UNIT_QUATERNION: UnitQuaternionValueType(),
    }
)


def get_value_type(kind: Union[str, ValueKind]) -> ValueType:
    """Return the shared adapter for ``kind``.

    ``KeyError`` is raised for unknown kinds.
    """

    try:
        return VALUE_TYPES[ValueKind(kind)]
    except ValueError as exc:
        known = ", ".join(repr(k.value) for k in ValueKind)
        raise KeyError(f"Unknown value kind {kind!r}; expected one of: {known}") from exc


__all__ = [
    "ValueType",
    "ValueKind",
    "VALUE_TYPES",
    "get_value_type",
    "NumberValueType",
    "Cartesian3ValueType",
    "ColorValueType",
    "UnitQuaternionValueType",
]

"""In-memory store of time-dynamic property values.

Packets describing constants or time-tagged samples over validity windows
are merged into per-interval sample tables; queries return the constant, an
exact sample, or an interpolated value.
"""

from .config import Settings, load_settings
from .core import (
    DynamicProperty,
    InterpolationAlgorithmName,
    SampleTable,
    TimeInterval,
    TimeIntervalCollection,
    merge_samples,
)
from .errors import ChronopropError, InvalidSampleError, MalformedPacketError, UnknownAlgorithmError
from .objects import DynamicObject, DynamicObjectCollection
from .types import Cartesian3, Color, Quaternion
from .value_types import VALUE_TYPES, ValueKind, get_value_type

__all__ = [
    "Settings",
    "load_settings",
    "DynamicProperty",
    "InterpolationAlgorithmName",
    "SampleTable",
    "TimeInterval",
    "TimeIntervalCollection",
    "merge_samples",
    "ChronopropError",
    "InvalidSampleError",
    "MalformedPacketError",
    "UnknownAlgorithmError",
    "DynamicObject",
    "DynamicObjectCollection",
    "Cartesian3",
    "Color",
    "Quaternion",
    "VALUE_TYPES",
    "ValueKind",
    "get_value_type",
]

"""Objects owning named dynamic properties, and collections of them.

An object packet looks like::

    {"id": "sat-1",
     "availability": "2012-03-15T10:00:00Z/2012-03-16T10:00:00Z",
     "position": {"epoch": "...", "cartesian": [0, x, y, z, 60, x, y, z]},
     "orientation": {"unitQuaternion": [0, 0, 0, 1]}}

Property fields are routed to value types through :data:`PROPERTY_FIELDS`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .config import Settings, default_settings
from .core.interpolation import DEFAULT_ALGORITHMS, AlgorithmMap
from .core.intervals import TimeInterval, parse_iso8601_interval
from .core.property import DynamicProperty
from .errors import ChronopropError, MalformedPacketError
from .utils.timeparse import TimeLike, to_seconds
from .value_types import VALUE_TYPES, ValueKind, ValueType

logger = logging.getLogger(__name__)

PROPERTY_FIELDS: Mapping[str, ValueKind] = MappingProxyType(
    {
        "position": ValueKind.CARTESIAN3,
        "orientation": ValueKind.UNIT_QUATERNION,
        "color": ValueKind.COLOR,
        "scale": ValueKind.NUMBER,
        "width": ValueKind.NUMBER,
    }
)


class DynamicObject:
    """An identified object with an optional availability window."""

    def __init__(self, id: str) -> None:
        if id is None:
            raise ValueError("id is required")
        self.id = id
        self.availability: Optional[TimeInterval] = None
        self._properties: Dict[str, DynamicProperty] = {}

    def __repr__(self) -> str:
        return f"DynamicObject({self.id!r}, properties={sorted(self._properties)})"

    @property
    def position(self) -> Optional[DynamicProperty]:
        return self._properties.get("position")

    @property
    def orientation(self) -> Optional[DynamicProperty]:
        return self._properties.get("orientation")

    @property
    def property_names(self) -> List[str]:
        return list(self._properties)

    def get_property(self, name: str) -> Optional[DynamicProperty]:
        return self._properties.get(name)

    def set_property(self, name: str, prop: DynamicProperty) -> None:
        self._properties[name] = prop

    def is_available(self, time: TimeLike) -> bool:
        """``True`` when no availability is set or it contains ``time``."""

        return self.availability is None or self.availability.contains(to_seconds(time))

    def get_value(self, name: str, time: TimeLike) -> Any:
        """Value of property ``name`` at ``time``; ``None`` while unavailable."""

        if not self.is_available(time):
            return None
        prop = self._properties.get(name)
        if prop is None:
            return None
        return prop.get_value(time)

    def process_packet_availability(self, packet: Mapping) -> bool:
        """Set :attr:`availability` from ``packet``; ``True`` if it was present."""

        availability = packet.get("availability")
        if availability is None:
            return False
        try:
            self.availability = parse_iso8601_interval(availability)
        except ValueError as exc:
            raise MalformedPacketError(str(exc), field="availability") from exc
        return True

    @staticmethod
    def merge_properties(target: "DynamicObject", source: "DynamicObject") -> None:
        """Copy into ``target`` every property it does not define yet."""

        for name, prop in source._properties.items():
            target._properties.setdefault(name, prop)
        if target.availability is None:
            target.availability = source.availability

    @staticmethod
    def undefine_properties(obj: "DynamicObject") -> None:
        """Drop all properties and the availability of ``obj``."""

        obj._properties.clear()
        obj.availability = None


class DynamicObjectCollection:
    """Objects keyed by id, built up from object packets."""

    def __init__(
        self,
        *,
        property_fields: Mapping[str, ValueKind] = PROPERTY_FIELDS,
        value_types: Mapping[ValueKind, ValueType] = VALUE_TYPES,
        algorithms: AlgorithmMap = DEFAULT_ALGORITHMS,
        settings: Settings | None = None,
    ) -> None:
        self.property_fields = property_fields
        self.value_types = value_types
        self.algorithms = algorithms
        self.settings = settings if settings is not None else default_settings()
        self._objects: Dict[str, DynamicObject] = {}

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[DynamicObject]:
        return iter(self._objects.values())

    def __contains__(self, id: object) -> bool:
        return id in self._objects

    def get_object(self, id: str) -> Optional[DynamicObject]:
        return self._objects.get(id)

    def get_or_create_object(self, id: str) -> DynamicObject:
        obj = self._objects.get(id)
        if obj is None:
            obj = DynamicObject(id)
            self._objects[id] = obj
        return obj

    def process_packet(self, packet: Mapping) -> DynamicObject:
        """Apply one object packet and return the object it targets.

        Every property field is attempted; the first failure is re-raised
        after the remaining fields have been applied.
        """

        if not isinstance(packet, Mapping):
            raise MalformedPacketError(f"object packet must be a mapping, got {type(packet).__name__}")
        obj_id = packet.get("id")
        if obj_id is None:
            raise MalformedPacketError("object packet has no id", field="id")

        obj = self.get_or_create_object(str(obj_id))
        errors: List[ChronopropError] = []
        try:
            obj.process_packet_availability(packet)
        except ChronopropError as exc:
            errors.append(exc)

        for field, kind in self.property_fields.items():
            if field not in packet:
                continue
            try:
                DynamicProperty.process_packet(
                    obj,
                    field,
                    self.value_types[kind],
                    packet[field],
                    algorithms=self.algorithms,
                    settings=self.settings,
                )
            except ChronopropError as exc:
                errors.append(exc)
        if errors:
            raise errors[0]
        return obj

    def process_document(self, packets: Iterable[Mapping]) -> List[ChronopropError]:
        """Apply a sequence of object packets, skipping those that fail.

        Returns the errors encountered, in packet order.
        """

        errors: List[ChronopropError] = []
        for position, packet in enumerate(packets):
            try:
                self.process_packet(packet)
            except ChronopropError as exc:
                logger.warning("packet %d: %s", position, exc)
                errors.append(exc)
        return errors


__all__ = ["PROPERTY_FIELDS", "DynamicObject", "DynamicObjectCollection"]

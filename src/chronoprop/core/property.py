"""Time-dynamic properties: packet ingestion and point-in-time queries.

A :class:`DynamicProperty` owns a :class:`TimeIntervalCollection` whose
payloads are :class:`SampleTable` objects.  Packets either set a constant for
an interval or merge time-tagged samples into it; :meth:`DynamicProperty.get_value`
returns the constant, an exact sample, or an interpolated value.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Generic, Iterable, List, Optional, Protocol, TypeVar, Union

from ..config import Settings, default_settings
from ..errors import ChronopropError, InvalidSampleError, MalformedPacketError
from ..utils.search import binary_search
from ..utils.timeparse import TimeLike, parse_iso8601, to_seconds
from ..value_types import ValueType
from .intervals import TimeInterval, TimeIntervalCollection, parse_iso8601_interval
from .interpolation import DEFAULT_ALGORITHMS, AlgorithmMap, InterpolationAlgorithm, resolve_algorithm
from .merge import decode_samples, merge_decoded
from .samples import SampleTable

logger = logging.getLogger(__name__)

T = TypeVar("T")

Packet = Union[Mapping, Any]


class PropertyOwner(Protocol):
    """Anything that stores properties under names (e.g. ``DynamicObject``)."""

    def get_property(self, name: str) -> Optional["DynamicProperty"]:
        ...

    def set_property(self, name: str, prop: "DynamicProperty") -> None:
        ...


class DynamicProperty(Generic[T]):
    """A value of type ``T`` that varies over time.

    Parameters
    ----------
    value_type:
        Adapter for the property's kind, shared by all properties of it.
    algorithms:
        Mapping from algorithm names to strategies.  Defaults to the three
        built-in strategies.
    settings:
        Supplies the interpolation algorithm and degree used for newly
        created sample tables.
    """

    def __init__(
        self,
        value_type: ValueType[T],
        *,
        algorithms: AlgorithmMap = DEFAULT_ALGORITHMS,
        settings: Settings | None = None,
    ) -> None:
        if settings is None:
            settings = default_settings()
        self.value_type = value_type
        self.algorithms = algorithms
        self._default_algorithm = resolve_algorithm(settings.interpolation.algorithm, algorithms)
        self._default_degree = settings.interpolation.degree
        self._intervals = TimeIntervalCollection()

    def __repr__(self) -> str:
        return f"DynamicProperty({self.value_type.name}, intervals={len(self._intervals)})"

    @property
    def intervals(self) -> TimeIntervalCollection:
        return self._intervals

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    @classmethod
    def process_packet(
        cls,
        parent: PropertyOwner,
        property_name: str,
        value_type: ValueType,
        packet_data: Optional[Union[Packet, List[Packet]]],
        constrained_interval: Optional[TimeInterval] = None,
        *,
        algorithms: AlgorithmMap = DEFAULT_ALGORITHMS,
        settings: Settings | None = None,
    ) -> bool:
        """Create ``parent``'s property if needed and add ``packet_data`` to it.

        Returns ``True`` when a new property was created.
        """

        if packet_data is None:
            return False

        created = False
        prop = parent.get_property(property_name)
        if prop is None:
            prop = cls(value_type, algorithms=algorithms, settings=settings)
            parent.set_property(property_name, prop)
            created = True

        prop.add_intervals(packet_data, constrained_interval)
        return created

    def add_intervals(
        self,
        packets: Union[Packet, List[Packet]],
        constrained_interval: Optional[TimeInterval] = None,
    ) -> None:
        """Add one packet or a list of packets.

        Only a list of mappings is a list of packets; any other list is a raw
        wire value such as a bare sample list.  Every packet of a list is
        attempted; if any fails the first error is re-raised once the others
        have been applied.
        """

        if not isinstance(packets, list) or not all(isinstance(p, Mapping) for p in packets):
            self.add_interval(packets, constrained_interval)
            return

        errors: List[ChronopropError] = []
        for packet in packets:
            try:
                self.add_interval(packet, constrained_interval)
            except ChronopropError as exc:
                logger.debug("packet not fully applied: %s", exc)
                errors.append(exc)
        if errors:
            raise errors[0]

    def add_interval(self, packet: Packet, constrained_interval: Optional[TimeInterval] = None) -> None:
        """Apply one packet, clipped to ``constrained_interval`` when given."""

        interval_text = packet.get("interval") if isinstance(packet, Mapping) else None
        if interval_text is None:
            interval = TimeInterval.infinite()
        else:
            try:
                interval = parse_iso8601_interval(interval_text)
            except ValueError as exc:
                raise MalformedPacketError(str(exc), field="interval") from exc

        if constrained_interval is not None:
            clipped = interval.intersect(constrained_interval)
            if clipped is None:
                logger.debug("packet interval lies outside the constraint; skipped")
                return
            interval = clipped

        raw = self.value_type.unwrap_interval(packet)
        self.add_interval_unwrapped(interval, packet if isinstance(packet, Mapping) else {}, raw)

    def add_interval_unwrapped(self, interval: TimeInterval, packet: Mapping, raw: Any) -> None:
        """Apply an already unwrapped value to the interval with ``interval``'s bounds.

        All validation happens before the sample table is touched, so a
        failing packet leaves the property unchanged.  Rejected samples
        (non-finite, or refused by the value type) are the exception: they
        are dropped, the rest is merged and :class:`InvalidSampleError` is
        raised afterwards.
        """

        value_type = self.value_type
        if not value_type.is_sampled(raw):
            # Fails on malformed constants before anything is stored
            value_type.create_value(raw)
            constant = value_type.pack_constant(raw)
            table = self._table_for(interval)
            table.set_constant(constant)
            return

        algorithm = self._packet_algorithm(packet)
        degree = self._packet_degree(packet)
        epoch = self._packet_epoch(packet)
        samples, rejected = decode_samples(
            list(raw), value_type.doubles_per_value, epoch, value_type.validate_sample
        )

        table = self._table_for(interval)
        table.set_interpolation(algorithm, degree)
        table.ensure_sampled()
        inserted = merge_decoded(table.times, table.values, samples, value_type.doubles_per_value)
        logger.debug(
            "%s: merged %d sample(s) (%d new) into [%s, %s]",
            value_type.name,
            len(samples),
            inserted,
            interval.start,
            interval.stop,
        )
        if rejected:
            raise InvalidSampleError(rejected)

    def _table_for(self, interval: TimeInterval) -> SampleTable:
        if interval.is_empty:
            raise MalformedPacketError(
                f"interval [{interval.start}, {interval.stop}] contains no instant", field="interval"
            )
        existing = self._intervals.find_interval(
            interval.start, interval.stop, interval.is_start_included, interval.is_stop_included
        )
        if existing is not None:
            return existing.data

        table = SampleTable(
            interpolation_algorithm=self._default_algorithm,
            interpolation_degree=self._default_degree,
        )
        stored = TimeInterval(
            interval.start, interval.stop, interval.is_start_included, interval.is_stop_included, table
        )
        try:
            self._intervals.add_interval(stored)
        except ValueError as exc:
            raise MalformedPacketError(str(exc), field="interval") from exc
        return table

    def _packet_algorithm(self, packet: Mapping) -> Optional[InterpolationAlgorithm]:
        name = packet.get("interpolationAlgorithm")
        if name is None:
            return None
        return resolve_algorithm(name, self.algorithms)

    @staticmethod
    def _packet_degree(packet: Mapping) -> Optional[int]:
        degree = packet.get("interpolationDegree")
        if degree is None:
            return None
        if isinstance(degree, bool) or not isinstance(degree, int):
            raise MalformedPacketError(f"expected an integer, got {degree!r}", field="interpolationDegree")
        return degree

    @staticmethod
    def _packet_epoch(packet: Mapping) -> Optional[float]:
        epoch = packet.get("epoch")
        if epoch is None:
            return None
        try:
            return parse_iso8601(epoch)
        except ValueError as exc:
            raise MalformedPacketError(str(exc), field="epoch") from exc

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_sample_table(self, time: TimeLike) -> Optional[SampleTable]:
        """Return the sample table of the interval containing ``time``."""

        interval = self._intervals.find_interval_containing(to_seconds(time))
        return None if interval is None else interval.data

    def get_value(self, time: TimeLike) -> Optional[T]:
        """Return the value at ``time`` or ``None`` when nothing covers it."""

        t = to_seconds(time)
        interval = self._intervals.find_interval_containing(t)
        if interval is None:
            return None

        table: SampleTable = interval.data
        value_type = self.value_type
        if not table.is_sampled:
            if table.constant_value is None:
                return None
            return value_type.create_value(table.constant_value)

        times = table.times
        values = table.values
        if not times:
            return None

        index = binary_search(times, t)
        if index >= 0:
            return value_type.create_value_from_array(values, index * value_type.doubles_per_value)

        index = ~index
        first_index = 0
        last_index = len(times) - 1
        if index > last_index:
            index = last_index

        degree = table.number_of_points - 1
        if len(times) >= table.number_of_points:
            # Window leans towards earlier samples
            first = index - degree // 2 - 1
            if first < 0:
                first = 0
            last = first + degree
            if last > last_index:
                last = last_index
                first = max(last - degree, 0)
            first_index, last_index = first, last

        length = last_index - first_index + 1
        width = value_type.doubles_per_interpolation_value
        x_table, y_table = table.scratch_tables(width)
        reference = times[last_index]
        for i in range(length):
            x_table[i] = times[first_index + i] - reference
        value_type.pack_values_for_interpolation(values, y_table, first_index, last_index)

        result = table.interpolation_algorithm.interpolate(
            t - reference, x_table[:length], y_table[: length * width], width
        )
        return value_type.create_value_from_interpolation_result(result, values, first_index, last_index)

    def get_values(self, times: Iterable[TimeLike]) -> List[Optional[T]]:
        """Evaluate :meth:`get_value` for each entry of ``times``."""

        return [self.get_value(t) for t in times]


__all__ = ["DynamicProperty", "PropertyOwner"]

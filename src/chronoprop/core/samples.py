"""Per-interval payload holding a constant or a sorted sample series."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .interpolation import (
    DEFAULT_ALGORITHMS,
    InterpolationAlgorithm,
    InterpolationAlgorithmName,
    clamp_degree,
)


@dataclass
class SampleTable:
    """Data stored for one interval of a dynamic property.

    Attributes
    ----------
    is_sampled:
        ``False`` while the table holds a single ``constant_value``.
    times:
        Strictly increasing sample times in absolute seconds.
    values:
        Flat list of ``len(times) * doubles_per_value`` numbers.
    interpolation_algorithm, interpolation_degree:
        Strategy used between samples; ``number_of_points`` follows from
        both.
    x_table, y_table:
        Scratch arrays reused by queries.  They are allocated on first use
        and dropped whenever the interpolation shape changes.
    """

    is_sampled: bool = False
    constant_value: Optional[Tuple[float, ...]] = None
    times: List[float] = field(default_factory=list)
    values: List[float] = field(default_factory=list)
    interpolation_algorithm: InterpolationAlgorithm = field(
        default_factory=lambda: DEFAULT_ALGORITHMS[InterpolationAlgorithmName.LINEAR]
    )
    interpolation_degree: int = 1
    number_of_points: int = 2
    x_table: Optional[np.ndarray] = field(default=None, repr=False)
    y_table: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.interpolation_degree = clamp_degree(self.interpolation_degree)
        self.number_of_points = self.interpolation_algorithm.required_point_count(self.interpolation_degree)

    def __len__(self) -> int:
        return len(self.times) if self.is_sampled else 0

    def set_interpolation(
        self,
        algorithm: Optional[InterpolationAlgorithm] = None,
        degree: Optional[int] = None,
    ) -> None:
        """Change the interpolation strategy and/or degree.

        The scratch tables are released so the next query reallocates them
        with the new shape.
        """

        if algorithm is None and degree is None:
            return
        if algorithm is not None:
            self.interpolation_algorithm = algorithm
        if degree is not None:
            self.interpolation_degree = clamp_degree(degree)
        self.number_of_points = self.interpolation_algorithm.required_point_count(self.interpolation_degree)
        self.x_table = None
        self.y_table = None

    def set_constant(self, value: Tuple[float, ...]) -> None:
        """Replace the table contents with a constant."""

        self.is_sampled = False
        self.constant_value = tuple(value)
        self.times = []
        self.values = []

    def ensure_sampled(self) -> None:
        """Switch a constant table to an empty sample series."""

        if not self.is_sampled:
            self.is_sampled = True
            self.constant_value = None
            self.times = []
            self.values = []

    def scratch_tables(self, doubles_per_interpolation_value: int) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(x_table, y_table)``, allocating them once per shape."""

        y_size = self.number_of_points * doubles_per_interpolation_value
        if self.x_table is None or self.y_table is None or self.y_table.size != y_size:
            self.x_table = np.zeros(self.number_of_points, dtype=float)
            self.y_table = np.zeros(y_size, dtype=float)
        return self.x_table, self.y_table


__all__ = ["SampleTable"]

"""Interpolation strategies used to evaluate sampled properties.

Every strategy works on a window of ``n`` points: ``x_table`` holds each
point's time offset (seconds, relative to the window's last sample) and
``y_table`` the packed values, ``value_width`` numbers per point.  Results are
returned as a 1-D :class:`numpy.ndarray` of length ``value_width``.
"""

from __future__ import annotations

import enum
import logging
from types import MappingProxyType
from typing import Mapping, Protocol, Sequence, Union, runtime_checkable

import numpy as np

from ..errors import UnknownAlgorithmError

logger = logging.getLogger(__name__)

MIN_DEGREE = 1


@runtime_checkable
class InterpolationAlgorithm(Protocol):
    """Protocol describing an interpolation strategy."""

    name: str

    def required_point_count(self, degree: int) -> int:
        """Return how many samples a window of ``degree`` needs."""

    def interpolate(
        self,
        x: float,
        x_table: Sequence[float],
        y_table: Sequence[float],
        value_width: int,
    ) -> np.ndarray:
        """Evaluate the window at offset ``x``."""


def _as_window(x_table: Sequence[float], y_table: Sequence[float], value_width: int) -> tuple[np.ndarray, np.ndarray]:
    xs = np.asarray(x_table, dtype=float)
    n = xs.size
    if n == 0:
        raise ValueError("interpolation window is empty")
    ys = np.asarray(y_table, dtype=float)[: n * value_width].reshape(n, value_width)
    return xs, ys


class LinearApproximation:
    """Straight-line blend between two points."""

    name = "LINEAR"

    def required_point_count(self, degree: int) -> int:
        return 2

    def interpolate(self, x, x_table, y_table, value_width):
        xs, ys = _as_window(x_table, y_table, value_width)
        if xs.size == 1:
            return ys[0].copy()
        x0, x1 = xs[0], xs[1]
        if x0 == x1:
            raise ValueError("x_table[0] and x_table[1] are equal; cannot divide by zero")
        return ((ys[1] - ys[0]) * x + x1 * ys[0] - x0 * ys[1]) / (x1 - x0)


class LagrangePolynomialApproximation:
    """Lagrange basis polynomial through every window point."""

    name = "LAGRANGE"

    def required_point_count(self, degree: int) -> int:
        return max(int(degree), MIN_DEGREE) + 1

    def interpolate(self, x, x_table, y_table, value_width):
        xs, ys = _as_window(x_table, y_table, value_width)
        n = xs.size
        result = np.zeros(value_width, dtype=float)
        for i in range(n):
            coefficient = 1.0
            for j in range(n):
                if j != i:
                    coefficient *= (x - xs[j]) / (xs[i] - xs[j])
            result += coefficient * ys[i]
        return result


class HermitePolynomialApproximation:
    """Order-zero Hermite polynomial built from a divided-difference tableau."""

    name = "HERMITE"

    def required_point_count(self, degree: int) -> int:
        return max(int(degree), MIN_DEGREE) + 1

    def interpolate(self, x, x_table, y_table, value_width):
        xs, ys = _as_window(x_table, y_table, value_width)
        n = xs.size
        coefficients = ys.copy()
        for level in range(1, n):
            for i in range(n - 1, level - 1, -1):
                coefficients[i] = (coefficients[i] - coefficients[i - 1]) / (xs[i] - xs[i - level])

        # Newton form, evaluated Horner style
        result = coefficients[n - 1].copy()
        for i in range(n - 2, -1, -1):
            result = result * (x - xs[i]) + coefficients[i]
        return result


class InterpolationAlgorithmName(str, enum.Enum):
    """Names accepted in the ``interpolationAlgorithm`` packet field."""

    LINEAR = "LINEAR"
    LAGRANGE = "LAGRANGE"
    HERMITE = "HERMITE"


AlgorithmMap = Mapping[InterpolationAlgorithmName, InterpolationAlgorithm]

DEFAULT_ALGORITHMS: AlgorithmMap = MappingProxyType(
    {
        InterpolationAlgorithmName.LINEAR: LinearApproximation(),
        InterpolationAlgorithmName.LAGRANGE: LagrangePolynomialApproximation(),
        InterpolationAlgorithmName.HERMITE: HermitePolynomialApproximation(),
    }
)


def resolve_algorithm(
    name: Union[str, InterpolationAlgorithmName],
    algorithms: AlgorithmMap = DEFAULT_ALGORITHMS,
) -> InterpolationAlgorithm:
    """Map an algorithm name to its strategy.

    Raises
    ------
    UnknownAlgorithmError
        If ``name`` is not one of ``algorithms``.
    """

    known = [key.value for key in algorithms]
    try:
        key = InterpolationAlgorithmName(str(getattr(name, "value", name)).upper())
        return algorithms[key]
    except (ValueError, KeyError) as exc:
        raise UnknownAlgorithmError(name, known) from exc


def clamp_degree(degree: int) -> int:
    """Raise ``degree`` to the minimum every strategy supports."""

    degree = int(degree)
    if degree < MIN_DEGREE:
        logger.debug("interpolation degree %d below minimum; using %d", degree, MIN_DEGREE)
        return MIN_DEGREE
    return degree


__all__ = [
    "InterpolationAlgorithm",
    "LinearApproximation",
    "LagrangePolynomialApproximation",
    "HermitePolynomialApproximation",
    "InterpolationAlgorithmName",
    "AlgorithmMap",
    "DEFAULT_ALGORITHMS",
    "resolve_algorithm",
    "clamp_degree",
]

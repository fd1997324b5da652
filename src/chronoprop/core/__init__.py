"""Core algorithms and data structures for chronoprop."""

from .intervals import TimeInterval, TimeIntervalCollection, parse_iso8601_interval
from .interpolation import (
    DEFAULT_ALGORITHMS,
    HermitePolynomialApproximation,
    InterpolationAlgorithm,
    InterpolationAlgorithmName,
    LagrangePolynomialApproximation,
    LinearApproximation,
    resolve_algorithm,
)
from .merge import merge_samples
from .samples import SampleTable
from .property import DynamicProperty

__all__ = [
    "TimeInterval",
    "TimeIntervalCollection",
    "parse_iso8601_interval",
    "DEFAULT_ALGORITHMS",
    "HermitePolynomialApproximation",
    "InterpolationAlgorithm",
    "InterpolationAlgorithmName",
    "LagrangePolynomialApproximation",
    "LinearApproximation",
    "resolve_algorithm",
    "merge_samples",
    "SampleTable",
    "DynamicProperty",
]

import numpy as np
import pytest

from chronoprop.core.interpolation import (
    DEFAULT_ALGORITHMS,
    HermitePolynomialApproximation,
    InterpolationAlgorithm,
    InterpolationAlgorithmName,
    LagrangePolynomialApproximation,
    LinearApproximation,
    clamp_degree,
    resolve_algorithm,
)
from chronoprop.errors import UnknownAlgorithmError


def test_linear_blend():
    result = LinearApproximation().interpolate(-5.0, [-10.0, 0.0], [0.0, 10.0], 1)
    np.testing.assert_allclose(result, [5.0])


def test_linear_multi_component():
    y = [0.0, 0.0, 0.0, 2.0, 4.0, 6.0]
    result = LinearApproximation().interpolate(-0.5, [-1.0, 0.0], y, 3)
    np.testing.assert_allclose(result, [1.0, 2.0, 3.0])


def test_linear_single_point_is_constant():
    np.testing.assert_allclose(LinearApproximation().interpolate(3.0, [0.0], [4.0], 1), [4.0])


def test_linear_rejects_coincident_points():
    with pytest.raises(ValueError):
        LinearApproximation().interpolate(0.0, [1.0, 1.0], [0.0, 1.0], 1)


@pytest.mark.parametrize("algorithm", [LagrangePolynomialApproximation(), HermitePolynomialApproximation()])
def test_polynomial_is_exact_for_cubic(algorithm):
    xs = np.array([-3.0, -2.0, -1.0, 0.0])
    ys = xs**3 - 2 * xs + 1
    for x in (-2.5, -0.25, 0.5):
        result = algorithm.interpolate(x, xs, ys, 1)
        assert result[0] == pytest.approx(x**3 - 2 * x + 1)


def test_lagrange_and_hermite_agree():
    xs = [-4.0, -2.5, -1.0, 0.0]
    ys = [1.0, 5.0, -2.0, 0.5, 3.0, 3.0, 2.0, 1.0]
    a = LagrangePolynomialApproximation().interpolate(-1.7, xs, ys, 2)
    b = HermitePolynomialApproximation().interpolate(-1.7, xs, ys, 2)
    np.testing.assert_allclose(a, b)


def test_required_point_count():
    assert LinearApproximation().required_point_count(5) == 2
    assert LagrangePolynomialApproximation().required_point_count(5) == 6
    assert HermitePolynomialApproximation().required_point_count(0) == 2


def test_resolve_algorithm():
    assert isinstance(resolve_algorithm("LAGRANGE"), LagrangePolynomialApproximation)
    assert resolve_algorithm(InterpolationAlgorithmName.HERMITE) is DEFAULT_ALGORITHMS[InterpolationAlgorithmName.HERMITE]
    assert all(isinstance(a, InterpolationAlgorithm) for a in DEFAULT_ALGORITHMS.values())
    with pytest.raises(UnknownAlgorithmError) as excinfo:
        resolve_algorithm("CUBIC_SPLINE")
    assert "LINEAR" in str(excinfo.value)


def test_default_algorithms_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_ALGORITHMS["LINEAR"] = None  # type: ignore[index]


def test_clamp_degree():
    assert clamp_degree(0) == 1
    assert clamp_degree(-3) == 1
    assert clamp_degree(4) == 4

"""Collection of unit tests for the forward mode automatic differentiation. Covered are
the initialization of independent variables in the scalar and vectorized layout, the
arithmetic overloads of :class:`~multifluid.ad.forward_mode.AdArray` and the elementary
functions in :mod:`multifluid.ad.functions`.

"""

from __future__ import annotations

import numpy as np
import pytest
import scipy.sparse as sps

from multifluid.ad import functions as af
from multifluid.ad.forward_mode import AdArray, initAdArrays


def test_scalar_quadratic_function():
    x, y = initAdArrays([1.0, 2.0])
    z = 1 * x + 2 * y + 3 * x * y + 4 * x * x + 5 * y * y
    assert z.val == 35.0
    assert isinstance(z.jac, np.ndarray)
    assert np.all(z.jac == [15.0, 25.0])


def test_vector_quadratic_function():
    x, y = initAdArrays([np.array([1.0, 1.0]), np.array([2.0, 3.0])])
    z = 1 * x + 2 * y + 3 * x * y + 4 * x * x + 5 * y * y
    J = np.array([[15, 0, 25, 0], [0, 18, 0, 35]])

    assert sps.issparse(z.jac)
    assert np.all(z.val == [35.0, 65.0])
    assert np.all(z.full_jac() == J)


def test_mixed_initialization_raises():
    with pytest.raises(ValueError):
        initAdArrays([1.0, np.array([1.0, 2.0])])


def test_independent_variables_are_not_modified():
    a, b = initAdArrays([3.0, 2.0])
    c = a * b - b / a
    assert a.val == 3.0 and np.all(a.jac == [1.0, 0.0])
    assert b.val == 2.0 and np.all(b.jac == [0.0, 1.0])
    assert np.isclose(c.val, 6.0 - 2.0 / 3.0)
    assert np.allclose(c.jac, [2.0 + 2.0 / 9.0, 3.0 - 1.0 / 3.0])


@pytest.mark.parametrize("scalar", [2.0, np.float64(2.0), 2])
def test_numpy_scalars_defer_to_ad(scalar):
    """Numpy scalars on the left hand side must not create object arrays."""
    (x,) = initAdArrays([3.0])
    for res in [scalar * x, scalar + x, scalar - x, scalar / x, scalar**x]:
        assert isinstance(res, AdArray)
        assert np.ndim(res.val) == 0

    assert np.isclose((scalar / x).jac[0], -float(scalar) / 9.0)
    assert np.isclose((scalar**x).jac[0], float(scalar) ** 3 * np.log(float(scalar)))


def test_power_rules():
    x, y = initAdArrays([2.0, 3.0])

    z = x**3
    assert z.val == 8.0 and np.allclose(z.jac, [12.0, 0.0])

    z = x**y
    assert z.val == 8.0
    assert np.allclose(z.jac, [12.0, 8.0 * np.log(2.0)])

    z = x**-1
    assert np.isclose(z.val, 0.5) and np.allclose(z.jac, [-0.25, 0.0])


def test_unary_operators_and_comparison():
    (x,) = initAdArrays([-1.5])
    assert (-x).val == 1.5 and np.all((-x).jac == [-1.0])
    assert (+x).val == -1.5 and (+x) is not x
    assert x < 0 and x <= -1.5 and not x > 0 and x >= -2.0
    assert float(x) == -1.5


def test_copy_is_independent():
    (x,) = initAdArrays([np.array([1.0, 2.0])])
    y = x.copy()
    y.val[0] = 10.0
    assert x.val[0] == 1.0


@pytest.mark.parametrize(
    "func, ref, dref",
    [
        (af.exp, np.exp, np.exp),
        (af.log, np.log, lambda v: 1.0 / v),
        (af.sqrt, np.sqrt, lambda v: 0.5 / np.sqrt(v)),
        (af.cbrt, np.cbrt, lambda v: 1.0 / (3.0 * np.cbrt(v) ** 2)),
    ],
)
def test_elementary_functions(func, ref, dref):
    v = 1.7
    (x,) = initAdArrays([v])
    res = func(x)
    assert np.isclose(res.val, ref(v))
    assert np.isclose(res.jac[0], dref(v))
    # Values without derivatives are forwarded to numpy.
    assert np.isclose(func(v), ref(v))

    (xv,) = initAdArrays([np.array([v, 2 * v])])
    resv = func(xv)
    assert np.allclose(resv.val, ref(np.array([v, 2 * v])))
    assert np.allclose(resv.full_jac(), np.diag(dref(np.array([v, 2 * v]))))


def test_abs_and_sign():
    (x,) = initAdArrays([-2.0])
    assert af.sign(x) == -1.0
    res = af.abs(x)
    assert res.val == 2.0 and np.all(res.jac == [-1.0])


def test_forceeval():
    assert type(af.forceeval(np.array(2.0))) is float
    assert type(af.forceeval(np.float64(2.0))) is float
    arr = np.ones(3)
    assert af.forceeval(arr) is arr

    ad = AdArray(np.array(2.0), np.ones(2))
    res = af.forceeval(ad)
    assert type(res.val) is float and np.all(res.jac == ad.jac)


def test_is_real():
    (x,) = initAdArrays([1.0])
    assert af.is_real(1.0) and af.is_real(np.float64(1.0)) and af.is_real(1)
    assert not af.is_real(x)
    assert not af.is_real(np.ones(2))

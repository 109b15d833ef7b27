"""Elementary functions acting on the numeric scalar types supported by the package.

Every closed-form term is written once, against the operations collected here, and can
then be evaluated with

- plain reals (``float``, numpy floating point scalars),
- numpy arrays (vectorized evaluation over many states),
- :class:`~multifluid.ad.forward_mode.AdArray` (values with derivatives).

Functions dispatch on :class:`~multifluid.ad.forward_mode.AdArray` and fall back to
numpy for everything else.

"""

from __future__ import annotations

import numbers
from typing import Union

import numpy as np

from multifluid.ad.forward_mode import AdArray

__all__ = [
    "NumericType",
    "is_real",
    "exp",
    "log",
    "sqrt",
    "cbrt",
    "abs",
    "sign",
    "forceeval",
]


NumericType = Union[float, np.ndarray, AdArray]
"""Scalar types accepted by the evaluation functions of this package."""


def is_real(var) -> bool:
    """True if ``var`` is a plain real scalar (no derivatives, no array)."""
    return isinstance(var, numbers.Real)


def exp(var):
    if isinstance(var, AdArray):
        val = np.exp(var.val)
        der = var.diagvec_mul_jac(val)
        return AdArray(val, der)
    else:
        return np.exp(var)


def log(var):
    if not isinstance(var, AdArray):
        return np.log(var)

    val = np.log(var.val)
    der = var.diagvec_mul_jac(1 / var.val)
    return AdArray(val, der)


def sqrt(var):
    if not isinstance(var, AdArray):
        return np.sqrt(var)

    val = np.sqrt(var.val)
    der = var.diagvec_mul_jac(0.5 / val)
    return AdArray(val, der)


def cbrt(var):
    if not isinstance(var, AdArray):
        return np.cbrt(var)

    val = np.cbrt(var.val)
    der = var.diagvec_mul_jac(1.0 / (3.0 * val * val))
    return AdArray(val, der)


def sign(var):
    if not isinstance(var, AdArray):
        return np.sign(var)
    else:
        return np.sign(var.val)


def abs(var):
    if not isinstance(var, AdArray):
        return np.abs(var)
    else:
        val = np.abs(var.val)
        jac = var.diagvec_mul_jac(sign(var))
        return AdArray(val, jac)


def forceeval(var):
    """Collapse ``var`` into a concrete value.

    Zero-dimensional numpy arrays and numpy scalars are turned into Python floats, also
    when they are the value of an :class:`AdArray`. Everything else is returned as is.

    This is called at the boundary of every summed contribution, such that results do
    not carry 0-d arrays through long chains of operations.

    """
    if isinstance(var, AdArray):
        if isinstance(var.val, np.ndarray) and var.val.ndim == 0:
            return AdArray(float(var.val), var.jac)
        return var
    if isinstance(var, np.ndarray):
        if var.ndim == 0:
            return float(var)
        return var
    if isinstance(var, np.floating):
        return float(var)
    return var

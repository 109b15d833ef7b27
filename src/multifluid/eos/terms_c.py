"""This module contains compiled versions of the residual Helmholtz energy terms in
:mod:`~multifluid.eos.terms`.

Naming convention:

- ``*_alphar_c``: NJIT compiled, scalar callable with a static signature, taking the
  coefficient arrays of a term and the reduced temperature ``tau`` and reduced density
  ``delta`` as floats.

The kernels implement the same sums as the Python methods ``alphar`` of the term
classes, in the same order of operations. They are used by the term classes whenever
``tau`` and ``delta`` are plain reals (see
:data:`~multifluid._core.USE_COMPILED_KERNELS`).

Important:
    Importing this module for the first time triggers numba NJIT compilation with
    static signatures for all kernels. This takes a few seconds, subsequent imports use
    the cache (see :data:`~multifluid._core.NUMBA_CACHE`).

    Coefficient arrays must be C-contiguous, read-only arrays, as created by
    :func:`~multifluid.utils.common.readonly_array`.

"""

from __future__ import annotations

import logging
import time
from typing import Any

import numba
import numpy as np

from .._core import NUMBA_CACHE, NUMBA_FAST_MATH

__all__ = [
    "power_alphar_c",
    "exponential_alphar_c",
    "gaussian_alphar_c",
    "gerg2004_alphar_c",
    "gaob_alphar_c",
    "lemmon2005_alphar_c",
    "nonanalytic_alphar_c",
]


logger = logging.getLogger(__name__)


_STATIC_FAST_COMPILE_ARGS: dict[str, Any] = {
    "fastmath": NUMBA_FAST_MATH,
    "cache": NUMBA_CACHE,
}

_f8 = numba.float64
_f8_arr = numba.types.Array(numba.float64, 1, "C", readonly=True)
_i8_arr = numba.types.Array(numba.int64, 1, "C", readonly=True)


_import_msg: str = "(import eos/terms_c.py)"
_import_start = time.time()

logger.debug(f"{_import_msg} Compiling residual Helmholtz energy kernels ..")


@numba.njit(
    _f8(_f8_arr, _f8_arr, _f8_arr, _f8_arr, _i8_arr, _f8, _f8),
    **_STATIC_FAST_COMPILE_ARGS,
)
def power_alphar_c(
    n: np.ndarray,
    t: np.ndarray,
    d: np.ndarray,
    c: np.ndarray,
    l_i: np.ndarray,
    tau: float,
    delta: float,
) -> float:
    """Compiled :meth:`~multifluid.eos.terms.PowerTerm.alphar`."""
    r = 0.0
    for k in range(n.shape[0]):
        val = n[k] * tau ** t[k] * delta ** d[k]
        if c[k] != 0.0:
            val = val * np.exp(-c[k] * delta ** l_i[k])
        r = r + val
    return r


@numba.njit(
    _f8(_f8_arr, _f8_arr, _f8_arr, _f8_arr, _i8_arr, _f8, _f8),
    **_STATIC_FAST_COMPILE_ARGS,
)
def exponential_alphar_c(
    n: np.ndarray,
    t: np.ndarray,
    d: np.ndarray,
    g: np.ndarray,
    l_i: np.ndarray,
    tau: float,
    delta: float,
) -> float:
    """Compiled :meth:`~multifluid.eos.terms.ExponentialTerm.alphar`."""
    r = 0.0
    for k in range(n.shape[0]):
        r = r + n[k] * tau ** t[k] * delta ** d[k] * np.exp(-g[k] * delta ** l_i[k])
    return r


@numba.njit(
    _f8(_f8_arr, _f8_arr, _f8_arr, _f8_arr, _f8_arr, _f8_arr, _f8_arr, _f8, _f8),
    **_STATIC_FAST_COMPILE_ARGS,
)
def gaussian_alphar_c(
    n: np.ndarray,
    t: np.ndarray,
    d: np.ndarray,
    eta: np.ndarray,
    beta: np.ndarray,
    gamma: np.ndarray,
    epsilon: np.ndarray,
    tau: float,
    delta: float,
) -> float:
    """Compiled :meth:`~multifluid.eos.terms.GaussianTerm.alphar`."""
    r = 0.0
    for k in range(n.shape[0]):
        dd = delta - epsilon[k]
        dt = tau - gamma[k]
        r = r + n[k] * tau ** t[k] * delta ** d[k] * np.exp(
            -eta[k] * dd * dd - beta[k] * dt * dt
        )
    return r


@numba.njit(
    _f8(_f8_arr, _f8_arr, _f8_arr, _f8_arr, _f8_arr, _f8_arr, _f8_arr, _f8, _f8),
    **_STATIC_FAST_COMPILE_ARGS,
)
def gerg2004_alphar_c(
    n: np.ndarray,
    t: np.ndarray,
    d: np.ndarray,
    eta: np.ndarray,
    beta: np.ndarray,
    gamma: np.ndarray,
    epsilon: np.ndarray,
    tau: float,
    delta: float,
) -> float:
    """Compiled :meth:`~multifluid.eos.terms.GERG2004Term.alphar`."""
    r = 0.0
    for k in range(n.shape[0]):
        dd = delta - epsilon[k]
        r = r + n[k] * tau ** t[k] * delta ** d[k] * np.exp(
            -eta[k] * dd * dd - beta[k] * (delta - gamma[k])
        )
    return r


@numba.njit(
    _f8(
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8,
        _f8,
    ),
    **_STATIC_FAST_COMPILE_ARGS,
)
def gaob_alphar_c(
    n: np.ndarray,
    t: np.ndarray,
    d: np.ndarray,
    eta: np.ndarray,
    beta: np.ndarray,
    gamma: np.ndarray,
    epsilon: np.ndarray,
    b: np.ndarray,
    tau: float,
    delta: float,
) -> float:
    """Compiled :meth:`~multifluid.eos.terms.GaoBTerm.alphar`."""
    r = 0.0
    for k in range(n.shape[0]):
        dd = delta - epsilon[k]
        dt = tau - gamma[k]
        r = r + n[k] * tau ** t[k] * delta ** d[k] * np.exp(
            eta[k] * dd * dd + 1.0 / (beta[k] * dt * dt + b[k])
        )
    return r


@numba.njit(
    _f8(_f8_arr, _f8_arr, _f8_arr, _i8_arr, _f8_arr, _f8, _f8),
    **_STATIC_FAST_COMPILE_ARGS,
)
def lemmon2005_alphar_c(
    n: np.ndarray,
    t: np.ndarray,
    d: np.ndarray,
    l_i: np.ndarray,
    m: np.ndarray,
    tau: float,
    delta: float,
) -> float:
    """Compiled :meth:`~multifluid.eos.terms.Lemmon2005Term.alphar`."""
    r = 0.0
    for k in range(n.shape[0]):
        ex = 0.0
        if l_i[k] != 0:
            ex = ex - delta ** l_i[k]
        if m[k] != 0.0:
            ex = ex - tau ** m[k]
        r = r + n[k] * tau ** t[k] * delta ** d[k] * np.exp(ex)
    return r


@numba.njit(
    _f8(
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8_arr,
        _f8,
        _f8,
    ),
    **_STATIC_FAST_COMPILE_ARGS,
)
def nonanalytic_alphar_c(
    n: np.ndarray,
    A: np.ndarray,
    B: np.ndarray,
    C: np.ndarray,
    D: np.ndarray,
    a: np.ndarray,
    b: np.ndarray,
    beta: np.ndarray,
    tau: float,
    delta: float,
) -> float:
    """Compiled :meth:`~multifluid.eos.terms.NonAnalyticTerm.alphar`."""
    r = 0.0
    s = (delta - 1.0) * (delta - 1.0)
    for k in range(n.shape[0]):
        theta = (1.0 - tau) + A[k] * s ** (1.0 / (2.0 * beta[k]))
        Delta = theta * theta + B[k] * s ** a[k]
        psi = np.exp(-C[k] * s - D[k] * (tau - 1.0) * (tau - 1.0))
        r = r + n[k] * Delta ** b[k] * delta * psi
    return r


logger.debug(
    f"{_import_msg} Done (elapsed time: {time.time() - _import_start} (s))."
)

"""Closed-form contributions to the residual reduced Helmholtz energy.

Every term is a sum over ``N`` sub-terms of the generic form

.. math::

    n_k \\tau^{t_k} \\delta^{d_k} g_k(\\tau, \\delta)~,

where the function :math:`g_k` distinguishes the term types. The set of term types is
closed and collected in the union :data:`EOSTerm`:

1. :class:`PowerTerm`
2. :class:`ExponentialTerm`
3. :class:`GaussianTerm`
4. :class:`GERG2004Term`
5. :class:`GaoBTerm`
6. :class:`Lemmon2005Term`
7. :class:`NonAnalyticTerm`
8. :class:`NullTerm`

Terms are frozen dataclasses holding read-only coefficient arrays, validated at
construction. They can be evaluated with any scalar type supported by
:mod:`multifluid.ad.functions`. For plain reals, the compiled kernels of
:mod:`~multifluid.eos.terms_c` are used.

:class:`TermCollection` sums an ordered list of terms, representing the residual
Helmholtz energy of one pure fluid or the departure function of one binary pair.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Iterator, Union

import numpy as np

import multifluid.ad.functions as af

from .._core import USE_COMPILED_KERNELS
from ..utils.common import is_integral, readonly_array, safe_sum
from ..utils.errors import MultiFluidModellingError
from .terms_c import (
    exponential_alphar_c,
    gaob_alphar_c,
    gaussian_alphar_c,
    gerg2004_alphar_c,
    lemmon2005_alphar_c,
    nonanalytic_alphar_c,
    power_alphar_c,
)

__all__ = [
    "PowerTerm",
    "ExponentialTerm",
    "GaussianTerm",
    "GERG2004Term",
    "GaoBTerm",
    "Lemmon2005Term",
    "NonAnalyticTerm",
    "NullTerm",
    "EOSTerm",
    "TermCollection",
]


def _setup_arrays(term, fields: tuple[str, ...]) -> None:
    """Replace the coefficients of a frozen term by read-only float arrays and check
    that they are of equal length."""
    for name in fields:
        arr = readonly_array(getattr(term, name))
        if arr.ndim != 1:
            raise MultiFluidModellingError(
                f"Coefficients {name} of {type(term).__name__} must be a 1D sequence."
            )
        object.__setattr__(term, name, arr)

    lengths = {name: getattr(term, name).size for name in fields}
    if len(set(lengths.values())) > 1:
        raise MultiFluidModellingError(
            f"Lengths are not all identical in {type(term).__name__}: {lengths}"
        )


def _integer_exponents(term, name: str) -> np.ndarray:
    """Return the integer version of the exponents ``name`` of a term.

    Raises:
        MultiFluidModellingError: If any exponent is not integral.

    """
    values = getattr(term, name)
    if not is_integral(values):
        raise MultiFluidModellingError(
            f"Non-integer entry in {name} found in {type(term).__name__}: {values}"
        )
    return readonly_array(values, dtype=np.int64)


def _use_kernel(tau, delta) -> bool:
    return USE_COMPILED_KERNELS and af.is_real(tau) and af.is_real(delta)


@dataclass(frozen=True, eq=False)
class PowerTerm:
    """Power terms with optional exponential cut-off.

    .. math::

        \\sum_k n_k \\tau^{t_k} \\delta^{d_k} \\exp(-c_k \\delta^{l_k})

    The coefficients :math:`c_k` are not given, but derived from the integer exponents
    :math:`l_k`: :math:`c_k = 1` if :math:`l_k > 0`, and zero otherwise.
    For all :math:`l_k = 0` this is a pure polynomial.

    Raises:
        MultiFluidModellingError: If the arrays are of unequal length or if ``l``
            contains non-integer values.

    """

    n: np.ndarray
    t: np.ndarray
    d: np.ndarray
    l: np.ndarray  # noqa: E741

    c: np.ndarray = field(init=False, repr=False)
    l_i: np.ndarray = field(init=False, repr=False)

    fields: ClassVar[tuple[str, ...]] = ("n", "t", "d", "l")

    def __post_init__(self) -> None:
        _setup_arrays(self, self.fields)
        object.__setattr__(self, "l_i", _integer_exponents(self, "l"))
        object.__setattr__(self, "c", readonly_array((self.l > 0).astype(np.float64)))

    def alphar(self, tau, delta):
        if _use_kernel(tau, delta):
            return power_alphar_c(
                self.n, self.t, self.d, self.c, self.l_i, float(tau), float(delta)
            )
        r = 0.0
        for k in range(self.n.size):
            val = self.n[k] * tau ** self.t[k] * delta ** self.d[k]
            if self.c[k] != 0.0:
                val = val * af.exp(-self.c[k] * delta ** int(self.l_i[k]))
            r = r + val
        return af.forceeval(r)


@dataclass(frozen=True, eq=False)
class ExponentialTerm:
    """Exponential terms with a decay coefficient :math:`g_k` separate from
    :math:`n_k`.

    .. math::

        \\sum_k n_k \\tau^{t_k} \\delta^{d_k} \\exp(-g_k \\delta^{l_k})

    The exponents :math:`l_k` must be integers.

    """

    n: np.ndarray
    t: np.ndarray
    d: np.ndarray
    g: np.ndarray
    l: np.ndarray  # noqa: E741

    l_i: np.ndarray = field(init=False, repr=False)

    fields: ClassVar[tuple[str, ...]] = ("n", "t", "d", "g", "l")

    def __post_init__(self) -> None:
        _setup_arrays(self, self.fields)
        object.__setattr__(self, "l_i", _integer_exponents(self, "l"))

    def alphar(self, tau, delta):
        if _use_kernel(tau, delta):
            return exponential_alphar_c(
                self.n, self.t, self.d, self.g, self.l_i, float(tau), float(delta)
            )
        r = 0.0
        for k in range(self.n.size):
            r = r + self.n[k] * tau ** self.t[k] * delta ** self.d[k] * af.exp(
                -self.g[k] * delta ** int(self.l_i[k])
            )
        return af.forceeval(r)


@dataclass(frozen=True, eq=False)
class GaussianTerm:
    """Gaussian bell-shaped terms for the critical region.

    .. math::

        \\sum_k n_k \\tau^{t_k} \\delta^{d_k}
        \\exp(-\\eta_k(\\delta - \\epsilon_k)^2 - \\beta_k(\\tau - \\gamma_k)^2)

    """

    n: np.ndarray
    t: np.ndarray
    d: np.ndarray
    eta: np.ndarray
    beta: np.ndarray
    gamma: np.ndarray
    epsilon: np.ndarray

    fields: ClassVar[tuple[str, ...]] = (
        "n",
        "t",
        "d",
        "eta",
        "beta",
        "gamma",
        "epsilon",
    )

    def __post_init__(self) -> None:
        _setup_arrays(self, self.fields)

    def alphar(self, tau, delta):
        if _use_kernel(tau, delta):
            return gaussian_alphar_c(
                self.n,
                self.t,
                self.d,
                self.eta,
                self.beta,
                self.gamma,
                self.epsilon,
                float(tau),
                float(delta),
            )
        r = 0.0
        for k in range(self.n.size):
            dd = delta - self.epsilon[k]
            dt = tau - self.gamma[k]
            r = r + self.n[k] * tau ** self.t[k] * delta ** self.d[k] * af.exp(
                -self.eta[k] * dd * dd - self.beta[k] * dt * dt
            )
        return af.forceeval(r)


@dataclass(frozen=True, eq=False)
class GERG2004Term:
    """Exponential terms of the departure functions in GERG-2004 and GERG-2008.

    .. math::

        \\sum_k n_k \\tau^{t_k} \\delta^{d_k}
        \\exp(-\\eta_k(\\delta - \\epsilon_k)^2 - \\beta_k(\\delta - \\gamma_k))

    Note that, unlike :class:`GaussianTerm`, both parts of the exponent depend on the
    reduced density only.

    """

    n: np.ndarray
    t: np.ndarray
    d: np.ndarray
    eta: np.ndarray
    beta: np.ndarray
    gamma: np.ndarray
    epsilon: np.ndarray

    fields: ClassVar[tuple[str, ...]] = (
        "n",
        "t",
        "d",
        "eta",
        "beta",
        "gamma",
        "epsilon",
    )

    def __post_init__(self) -> None:
        _setup_arrays(self, self.fields)

    def alphar(self, tau, delta):
        if _use_kernel(tau, delta):
            return gerg2004_alphar_c(
                self.n,
                self.t,
                self.d,
                self.eta,
                self.beta,
                self.gamma,
                self.epsilon,
                float(tau),
                float(delta),
            )
        r = 0.0
        for k in range(self.n.size):
            dd = delta - self.epsilon[k]
            r = r + self.n[k] * tau ** self.t[k] * delta ** self.d[k] * af.exp(
                -self.eta[k] * dd * dd - self.beta[k] * (delta - self.gamma[k])
            )
        return af.forceeval(r)


@dataclass(frozen=True, eq=False)
class GaoBTerm:
    """Terms of Gao et al. (2020) for ammonia.

    .. math::

        \\sum_k n_k \\tau^{t_k} \\delta^{d_k}
        \\exp\\left(\\eta_k(\\delta - \\epsilon_k)^2
        + \\frac{1}{\\beta_k(\\tau - \\gamma_k)^2 + b_k}\\right)

    Important:
        The coefficients :attr:`eta` are stored with the sign used in the formula
        above, which is the *negative* of the values found in parameter records. The
        sign flip is performed by :func:`~multifluid.eos.builders.build_eos_terms`.

    """

    n: np.ndarray
    t: np.ndarray
    d: np.ndarray
    eta: np.ndarray
    beta: np.ndarray
    gamma: np.ndarray
    epsilon: np.ndarray
    b: np.ndarray

    fields: ClassVar[tuple[str, ...]] = (
        "n",
        "t",
        "d",
        "eta",
        "beta",
        "gamma",
        "epsilon",
        "b",
    )

    def __post_init__(self) -> None:
        _setup_arrays(self, self.fields)

    def alphar(self, tau, delta):
        if _use_kernel(tau, delta):
            return gaob_alphar_c(
                self.n,
                self.t,
                self.d,
                self.eta,
                self.beta,
                self.gamma,
                self.epsilon,
                self.b,
                float(tau),
                float(delta),
            )
        r = 0.0
        for k in range(self.n.size):
            dd = delta - self.epsilon[k]
            dt = tau - self.gamma[k]
            r = r + self.n[k] * tau ** self.t[k] * delta ** self.d[k] * af.exp(
                self.eta[k] * dd * dd + 1.0 / (self.beta[k] * dt * dt + self.b[k])
            )
        return af.forceeval(r)


@dataclass(frozen=True, eq=False)
class Lemmon2005Term:
    """Terms with exponential decay in both reduced density and temperature, as used
    by Lemmon and Jacobsen (2005).

    .. math::

        \\sum_k n_k \\tau^{t_k} \\delta^{d_k} \\exp(-\\delta^{l_k} - \\tau^{m_k})

    The density part of the exponent is only present for :math:`l_k \\neq 0`, the
    temperature part only for :math:`m_k \\neq 0`. The exponents :math:`l_k` must be
    integers.

    """

    n: np.ndarray
    t: np.ndarray
    d: np.ndarray
    l: np.ndarray  # noqa: E741
    m: np.ndarray

    l_i: np.ndarray = field(init=False, repr=False)

    fields: ClassVar[tuple[str, ...]] = ("n", "t", "d", "l", "m")

    def __post_init__(self) -> None:
        _setup_arrays(self, self.fields)
        object.__setattr__(self, "l_i", _integer_exponents(self, "l"))

    def alphar(self, tau, delta):
        if _use_kernel(tau, delta):
            return lemmon2005_alphar_c(
                self.n, self.t, self.d, self.l_i, self.m, float(tau), float(delta)
            )
        r = 0.0
        for k in range(self.n.size):
            ex = 0.0
            if self.l_i[k] != 0:
                ex = ex - delta ** int(self.l_i[k])
            if self.m[k] != 0.0:
                ex = ex - tau ** self.m[k]
            r = r + self.n[k] * tau ** self.t[k] * delta ** self.d[k] * af.exp(ex)
        return af.forceeval(r)


@dataclass(frozen=True, eq=False)
class NonAnalyticTerm:
    """Non-analytic terms of Span and Wagner (1996) for the critical region.

    With :math:`s = (\\delta - 1)^2`:

    .. math::

        \\theta_k = (1 - \\tau) + A_k s^{1 / (2 \\beta_k)}~,~
        \\Delta_k = \\theta_k^2 + B_k s^{a_k}~,~
        \\Psi_k = \\exp(-C_k s - D_k (\\tau - 1)^2)~,

    and the contribution is :math:`\\sum_k n_k \\Delta_k^{b_k} \\delta \\Psi_k`.

    Note:
        The derivatives of this term are singular at :math:`\\delta = 1`.

    """

    n: np.ndarray
    A: np.ndarray
    B: np.ndarray
    C: np.ndarray
    D: np.ndarray
    a: np.ndarray
    b: np.ndarray
    beta: np.ndarray

    fields: ClassVar[tuple[str, ...]] = ("n", "A", "B", "C", "D", "a", "b", "beta")

    def __post_init__(self) -> None:
        _setup_arrays(self, self.fields)

    def alphar(self, tau, delta):
        if _use_kernel(tau, delta):
            return nonanalytic_alphar_c(
                self.n,
                self.A,
                self.B,
                self.C,
                self.D,
                self.a,
                self.b,
                self.beta,
                float(tau),
                float(delta),
            )
        r = 0.0
        s = (delta - 1.0) * (delta - 1.0)
        for k in range(self.n.size):
            theta = (1.0 - tau) + self.A[k] * s ** (1.0 / (2.0 * self.beta[k]))
            Delta = theta * theta + self.B[k] * s ** self.a[k]
            psi = af.exp(-self.C[k] * s - self.D[k] * (tau - 1.0) * (tau - 1.0))
            r = r + self.n[k] * Delta ** self.b[k] * delta * psi
        return af.forceeval(r)


@dataclass(frozen=True, eq=False)
class NullTerm:
    """Placeholder for a vanishing contribution, e.g. no departure function between
    two components, or the diagonal of a departure function matrix."""

    fields: ClassVar[tuple[str, ...]] = ()

    def alphar(self, tau, delta) -> float:
        return 0.0


EOSTerm = Union[
    PowerTerm,
    ExponentialTerm,
    GaussianTerm,
    GERG2004Term,
    GaoBTerm,
    Lemmon2005Term,
    NonAnalyticTerm,
    NullTerm,
]
"""The closed set of term types which can appear in a :class:`TermCollection`."""

_TERM_TYPES: tuple[type, ...] = (
    PowerTerm,
    ExponentialTerm,
    GaussianTerm,
    GERG2004Term,
    GaoBTerm,
    Lemmon2005Term,
    NonAnalyticTerm,
    NullTerm,
)


class TermCollection:
    """An ordered collection of terms, whose residual Helmholtz energy is the sum of the
    contributions of all terms.

    Terms can be appended with :meth:`add_term` until the collection is locked with
    :meth:`lock`. Locked collections are immutable and can be shared between
    concurrent evaluations.

    Parameters:
        terms: ``default=()``

            Terms to be appended upon creation.

    Raises:
        MultiFluidModellingError: If a term is not one of the types in
            :data:`EOSTerm`.

    """

    def __init__(self, terms: Iterable[EOSTerm] = ()) -> None:
        self._terms: list[EOSTerm] = []
        self._locked: bool = False

        for term in terms:
            self.add_term(term)

    def __repr__(self) -> str:
        names = ", ".join(type(t).__name__ for t in self._terms)
        return f"TermCollection([{names}], locked={self._locked})"

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self) -> Iterator[EOSTerm]:
        for term in self._terms:
            yield term

    def __getitem__(self, i: int) -> EOSTerm:
        return self._terms[i]

    @property
    def is_locked(self) -> bool:
        """True if no more terms can be added."""
        return self._locked

    def add_term(self, term: EOSTerm) -> None:
        """Append a term to the collection.

        Raises:
            MultiFluidModellingError: If the collection is locked, or if the term is of
                an unsupported type.

        """
        if self._locked:
            raise MultiFluidModellingError("Cannot add terms to a locked collection.")
        if not isinstance(term, _TERM_TYPES):
            allowed = ", ".join(t.__name__ for t in _TERM_TYPES)
            raise MultiFluidModellingError(
                f"Unsupported term type {type(term).__name__}; allowed are {{{allowed}}}"
            )
        self._terms.append(term)

    def lock(self) -> TermCollection:
        """Lock the collection against further modifications.

        Returns:
            The collection itself.

        """
        self._locked = True
        return self

    def alphar(self, tau, delta):
        """Residual reduced Helmholtz energy, summed over all terms.

        An empty collection contributes zero.

        """
        return af.forceeval(
            safe_sum([af.forceeval(term.alphar(tau, delta)) for term in self._terms])
        )

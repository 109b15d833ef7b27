"""Tests for the residual Helmholtz energy terms in :mod:`multifluid.eos.terms`.

Values and first derivatives of every term type are compared against symbolic
expressions created with sympy. Further, the compiled kernels are compared against the
generic evaluation, and the validation of coefficients at construction is tested.

"""

from __future__ import annotations

import dataclasses
import math
from typing import Callable

import numpy as np
import pytest
import sympy as sp

from multifluid.ad.forward_mode import AdArray
from multifluid.eos.terms import (
    ExponentialTerm,
    GaoBTerm,
    GaussianTerm,
    GERG2004Term,
    Lemmon2005Term,
    NonAnalyticTerm,
    NullTerm,
    PowerTerm,
    TermCollection,
)
from multifluid.utils.derivative_testing import value_and_gradient
from multifluid.utils.errors import MultiFluidModellingError

# Reduced state at which terms are evaluated. delta must not be 1, where the
# non-analytic terms are singular.
TAU: float = 1.05
DELTA: float = 0.8

TERMS: dict[str, Callable[[], object]] = {
    "power": lambda: PowerTerm(
        n=[0.5, -1.2, 0.3], t=[0.25, 1.125, 2.5], d=[1, 2, 3], l=[0, 1, 2]
    ),
    "exponential": lambda: ExponentialTerm(
        n=[0.4, -0.7], t=[1.5, 0.5], d=[1, 3], g=[1.0, 0.8], l=[1, 2]
    ),
    "gaussian": lambda: GaussianTerm(
        n=[-0.3, 0.2],
        t=[1.0, 2.0],
        d=[2, 3],
        eta=[1.0, 0.7],
        beta=[1.2, 0.9],
        gamma=[1.1, 1.0],
        epsilon=[0.8, 1.2],
    ),
    "gerg2004": lambda: GERG2004Term(
        n=[-0.0098, 0.0042],
        t=[2.1, 1.3],
        d=[1, 2],
        eta=[1.0, 0.25],
        beta=[1.0, 0.5],
        gamma=[0.5, 0.5],
        epsilon=[0.5, 0.5],
    ),
    "gaob": lambda: GaoBTerm(
        n=[-1.6, 0.7],
        t=[1.5, 1.0],
        d=[1, 1],
        eta=[0.8, 1.1],
        beta=[-1.0, -0.5],
        gamma=[1.1, 1.3],
        epsilon=[0.9, 1.1],
        b=[1.4, 1.6],
    ),
    "lemmon2005": lambda: Lemmon2005Term(
        n=[0.2, -0.1, 0.05],
        t=[0.5, 1.0, 2.0],
        d=[1, 2, 3],
        l=[0, 1, 2],
        m=[0.0, 0.5, 1.0],
    ),
    "nonanalytic": lambda: NonAnalyticTerm(
        n=[-0.148746408567],
        A=[0.32],
        B=[0.2],
        C=[28.0],
        D=[700.0],
        a=[3.5],
        b=[0.85],
        beta=[0.3],
    ),
}


def _symbolic_alphar(term, tau: sp.Symbol, delta: sp.Symbol) -> sp.Expr:
    """Symbolic version of the term, written down from the published formulas."""
    f = [
        {name: float(getattr(term, name)[k]) for name in term.fields}
        for k in range(term.n.size)
    ]
    exp = sp.exp
    if isinstance(term, PowerTerm):
        return sum(
            c["n"] * tau ** c["t"] * delta ** c["d"]
            * (exp(-(delta ** int(c["l"]))) if c["l"] > 0 else 1)
            for c in f
        )
    elif isinstance(term, ExponentialTerm):
        return sum(
            c["n"] * tau ** c["t"] * delta ** c["d"] * exp(-c["g"] * delta ** int(c["l"]))
            for c in f
        )
    elif isinstance(term, GaussianTerm):
        return sum(
            c["n"] * tau ** c["t"] * delta ** c["d"]
            * exp(
                -c["eta"] * (delta - c["epsilon"]) ** 2
                - c["beta"] * (tau - c["gamma"]) ** 2
            )
            for c in f
        )
    elif isinstance(term, GERG2004Term):
        return sum(
            c["n"] * tau ** c["t"] * delta ** c["d"]
            * exp(
                -c["eta"] * (delta - c["epsilon"]) ** 2
                - c["beta"] * (delta - c["gamma"])
            )
            for c in f
        )
    elif isinstance(term, GaoBTerm):
        return sum(
            c["n"] * tau ** c["t"] * delta ** c["d"]
            * exp(
                c["eta"] * (delta - c["epsilon"]) ** 2
                + 1 / (c["beta"] * (tau - c["gamma"]) ** 2 + c["b"])
            )
            for c in f
        )
    elif isinstance(term, Lemmon2005Term):
        return sum(
            c["n"] * tau ** c["t"] * delta ** c["d"]
            * exp(
                -(delta ** int(c["l"]) if c["l"] != 0 else 0)
                - (tau ** c["m"] if c["m"] != 0 else 0)
            )
            for c in f
        )
    elif isinstance(term, NonAnalyticTerm):
        s = (delta - 1) ** 2
        res = 0
        for c in f:
            theta = (1 - tau) + c["A"] * s ** (1 / (2 * c["beta"]))
            Delta = theta**2 + c["B"] * s ** c["a"]
            psi = exp(-c["C"] * s - c["D"] * (tau - 1) ** 2)
            res += c["n"] * Delta ** c["b"] * delta * psi
        return res
    raise AssertionError(f"No symbolic expression for {type(term)}.")


@pytest.fixture(params=list(TERMS.keys()))
def term(request):
    """All term types with non-trivial coefficients."""
    return TERMS[request.param]()


def test_value_and_derivatives_match_symbolic(term) -> None:
    """Values and the AD gradient with respect to tau and delta must match the
    symbolic expressions."""
    tau, delta = sp.symbols("tau delta", positive=True)
    expr = _symbolic_alphar(term, tau, delta)
    at = {tau: TAU, delta: DELTA}

    val_ref = float(expr.subs(at).evalf(30))
    dtau_ref = float(sp.diff(expr, tau).subs(at).evalf(30))
    ddelta_ref = float(sp.diff(expr, delta).subs(at).evalf(30))

    assert term.alphar(TAU, DELTA) == pytest.approx(val_ref, rel=1e-12)

    val, grad = value_and_gradient(term.alphar, np.array([TAU, DELTA]))
    assert val == pytest.approx(val_ref, rel=1e-12)
    assert grad[0] == pytest.approx(dtau_ref, rel=1e-10)
    assert grad[1] == pytest.approx(ddelta_ref, rel=1e-10)


def test_compiled_and_generic_evaluation_agree(term) -> None:
    """Plain reals use the compiled kernels, arrays the generic evaluation, which also
    supports evaluation at multiple states."""
    taus = np.array([0.8, TAU, 1.6])
    deltas = np.array([0.3, DELTA, 1.4])

    vectorized = term.alphar(taus, deltas)
    assert isinstance(vectorized, np.ndarray) and vectorized.shape == (3,)
    for i in range(3):
        scalar = term.alphar(float(taus[i]), float(deltas[i]))
        assert type(scalar) is float
        assert scalar == pytest.approx(vectorized[i], rel=1e-12, abs=1e-300)


def test_term_is_immutable(term) -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        term.n = np.ones(1)
    with pytest.raises(ValueError):
        term.n[0] = 1.0


@pytest.mark.parametrize("name", list(TERMS.keys()))
def test_empty_terms_are_zero(name: str) -> None:
    """Terms without coefficients contribute zero, for every scalar type."""
    cls = type(TERMS[name]())
    term = cls(**{f: [] for f in cls.fields})
    assert term.alphar(TAU, DELTA) == 0.0
    assert term.alphar(AdArray(TAU, np.ones(2)), DELTA) == 0.0
    assert NullTerm().alphar(TAU, DELTA) == 0.0


def test_power_exponential_part_from_l() -> None:
    term = PowerTerm(n=[1.0, 2.0], t=[0.0, 1.0], d=[1.0, 2.0], l=[0, 0])
    assert np.all(term.c == 0.0)
    assert term.alphar(TAU, DELTA) == pytest.approx(DELTA + 2.0 * TAU * DELTA**2)

    term = PowerTerm(n=[1.0, 2.0], t=[0.0, 1.0], d=[1.0, 2.0], l=[0, 2])
    assert np.all(term.c == [0.0, 1.0])
    assert term.l_i.dtype == np.int64
    assert term.alphar(TAU, DELTA) == pytest.approx(
        DELTA + 2.0 * TAU * DELTA**2 * math.exp(-(DELTA**2))
    )


def test_lemmon2005_exponent_parts_only_for_nonzero_exponents() -> None:
    """With l and m zero, the exponential factor is one and not exp(-2)."""
    term = Lemmon2005Term(n=[1.0], t=[0.0], d=[0.0], l=[0], m=[0.0])
    assert term.alphar(TAU, DELTA) == pytest.approx(1.0)

    term = Lemmon2005Term(n=[1.0], t=[0.0], d=[0.0], l=[1], m=[0.0])
    assert term.alphar(TAU, DELTA) == pytest.approx(math.exp(-DELTA))

    term = Lemmon2005Term(n=[1.0], t=[0.0], d=[0.0], l=[0], m=[2.0])
    assert term.alphar(TAU, DELTA) == pytest.approx(math.exp(-(TAU**2)))


def test_gerg2004_differs_from_gaussian() -> None:
    """The second part of the exponent of GERG-2004 terms is linear in delta."""
    kwargs = dict(
        n=[1.0], t=[0.0], d=[0.0], eta=[0.0], beta=[1.0], gamma=[0.5], epsilon=[0.0]
    )
    assert GERG2004Term(**kwargs).alphar(TAU, DELTA) == pytest.approx(
        math.exp(-(DELTA - 0.5))
    )
    assert GaussianTerm(**kwargs).alphar(TAU, DELTA) == pytest.approx(
        math.exp(-((TAU - 0.5) ** 2))
    )


@pytest.mark.parametrize(
    "cls, kwargs",
    [
        (PowerTerm, dict(n=[1.0], t=[1.0], d=[1.0], l=[1.5])),
        (ExponentialTerm, dict(n=[1.0], t=[1.0], d=[1.0], g=[1.0], l=[0.5])),
        (Lemmon2005Term, dict(n=[1.0], t=[1.0], d=[1.0], l=[2.1], m=[1.0])),
    ],
)
def test_non_integer_exponents_raise(cls, kwargs) -> None:
    with pytest.raises(MultiFluidModellingError, match="Non-integer"):
        cls(**kwargs)


@pytest.mark.parametrize("name", list(TERMS.keys()))
def test_unequal_lengths_raise(name: str) -> None:
    cls = type(TERMS[name]())
    kwargs = {f: [1.0, 1.0] for f in cls.fields}
    kwargs[cls.fields[-1]] = [1.0]
    with pytest.raises(MultiFluidModellingError, match="Lengths are not all identical"):
        cls(**kwargs)


def test_term_collection() -> None:
    power = TERMS["power"]()
    gaussian = TERMS["gaussian"]()

    collection = TermCollection([power])
    collection.add_term(gaussian)
    assert len(collection) == 2
    assert list(collection) == [power, gaussian]
    assert collection[1] is gaussian

    expected = power.alphar(TAU, DELTA) + gaussian.alphar(TAU, DELTA)
    assert collection.alphar(TAU, DELTA) == pytest.approx(expected, rel=1e-15)

    val, grad = value_and_gradient(collection.alphar, np.array([TAU, DELTA]))
    _, grad_p = value_and_gradient(power.alphar, np.array([TAU, DELTA]))
    _, grad_g = value_and_gradient(gaussian.alphar, np.array([TAU, DELTA]))
    assert val == pytest.approx(expected, rel=1e-15)
    assert np.allclose(grad, grad_p + grad_g, rtol=1e-14)

    assert collection.lock() is collection
    assert collection.is_locked
    with pytest.raises(MultiFluidModellingError, match="locked"):
        collection.add_term(NullTerm())


def test_term_collection_rejects_foreign_types() -> None:
    collection = TermCollection()
    with pytest.raises(MultiFluidModellingError, match="Unsupported term type"):
        collection.add_term(lambda tau, delta: tau * delta)
    assert len(collection) == 0
    assert collection.alphar(TAU, DELTA) == 0.0

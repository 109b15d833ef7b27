"""Construction of term collections from parameter records.

Parameter records are the parsed (JSON) dictionaries of the CoolProp fluid and mixture
libraries:

- A pure fluid record contains the list of terms of its residual Helmholtz energy in
  ``record["EOS"][0]["alphar"]``. Each entry carries a ``"type"`` tag and the
  coefficient arrays of the term.
- A departure function record carries a ``"Name"``, a ``"type"`` and the coefficient
  arrays. The composite types ``GERG-2004``, ``GERG-2008`` and
  ``Gaussian+Exponential`` additionally carry the number of leading power terms
  ``"Npower"``.

All builders return locked :class:`~multifluid.eos.terms.TermCollection` instances.

"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from ..utils.common import all_same_length
from ..utils.errors import MultiFluidModellingError
from ..utils.logging import time_logger
from .terms import (
    EOSTerm,
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

__all__ = [
    "PURE_TERM_TYPES",
    "DEPARTURE_TYPES",
    "build_power_term",
    "build_eos_terms",
    "get_eos_terms",
    "build_departure_function",
]

logger = logging.getLogger(__name__)


PURE_TERM_TYPES: tuple[str, ...] = (
    "ResidualHelmholtzPower",
    "ResidualHelmholtzGaussian",
    "ResidualHelmholtzNonAnalytic",
    "ResidualHelmholtzGaoB",
    "ResidualHelmholtzLemmon2005",
    "ResidualHelmholtzExponential",
)
"""Term types supported in the residual Helmholtz energy of a pure fluid."""

DEPARTURE_TYPES: tuple[str, ...] = (
    "Exponential",
    "GERG-2004",
    "GERG-2008",
    "Gaussian+Exponential",
    "none",
)
"""Supported types of departure functions."""

_COMPOSITE_FIELDS: tuple[str, ...] = ("n", "t", "d", "eta", "beta", "gamma", "epsilon")


def _check_lengths(record: Mapping[str, Any], fields: Sequence[str]) -> None:
    if not all_same_length(record, fields):
        raise MultiFluidModellingError(
            f"Lengths are not all identical in {record.get('type')!r} term,"
            + f" fields {tuple(fields)}."
        )


def _has_values(record: Mapping[str, Any], name: str) -> bool:
    values = record.get(name)
    return values is not None and len(values) > 0


def _get_or_zeros(record: Mapping[str, Any], name: str, size: int) -> np.ndarray:
    """Return the field ``name`` of a record, or zeros if it is absent or empty."""
    if not _has_values(record, name):
        return np.zeros(size)
    return np.asarray(record[name], dtype=float)


def build_power_term(record: Mapping[str, Any]) -> PowerTerm:
    """Build a power term from a record with fields ``n`` and optionally ``t``, ``d``
    and ``l``.

    Missing or empty fields ``t``, ``d`` and ``l`` are treated as zeros. Without
    ``l``, the term is a pure polynomial.

    """
    if "n" not in record:
        raise MultiFluidModellingError(
            f"Field 'n' missing in record of type {record.get('type')!r}."
        )
    size = len(record["n"])
    fields = [f for f in ("n", "t", "d", "l") if _has_values(record, f)]
    _check_lengths(record, fields)
    return PowerTerm(
        n=_get_or_zeros(record, "n", size),
        t=_get_or_zeros(record, "t", size),
        d=_get_or_zeros(record, "d", size),
        l=_get_or_zeros(record, "l", size),
    )


def _build_gaussian(record: Mapping[str, Any]) -> GaussianTerm:
    _check_lengths(record, _COMPOSITE_FIELDS)
    return GaussianTerm(**{f: record[f] for f in _COMPOSITE_FIELDS})


def _build_exponential(record: Mapping[str, Any]) -> ExponentialTerm:
    fields = ("n", "t", "d", "g", "l")
    _check_lengths(record, fields)
    return ExponentialTerm(**{f: record[f] for f in fields})


def _build_lemmon2005(record: Mapping[str, Any]) -> Lemmon2005Term:
    fields = ("n", "t", "d", "l", "m")
    _check_lengths(record, fields)
    return Lemmon2005Term(**{f: record[f] for f in fields})


def _build_gaob(record: Mapping[str, Any]) -> GaoBTerm:
    fields = ("n", "t", "d", "eta", "beta", "gamma", "epsilon", "b")
    _check_lengths(record, fields)
    kwargs = {f: record[f] for f in fields}
    # Records store the coefficient with the opposite sign of the formula.
    kwargs["eta"] = -np.asarray(record["eta"], dtype=float)
    return GaoBTerm(**kwargs)


def _build_nonanalytic(record: Mapping[str, Any]) -> NonAnalyticTerm:
    fields = ("n", "A", "B", "C", "D", "a", "b", "beta")
    _check_lengths(record, fields)
    return NonAnalyticTerm(**{f: record[f] for f in fields})


_PURE_BUILDERS: dict[str, Callable[[Mapping[str, Any]], EOSTerm]] = {
    "ResidualHelmholtzPower": build_power_term,
    "ResidualHelmholtzGaussian": _build_gaussian,
    "ResidualHelmholtzNonAnalytic": _build_nonanalytic,
    "ResidualHelmholtzGaoB": _build_gaob,
    "ResidualHelmholtzLemmon2005": _build_lemmon2005,
    "ResidualHelmholtzExponential": _build_exponential,
}


@time_logger(sections=["terms"])
def build_eos_terms(alphar: Sequence[Mapping[str, Any]]) -> TermCollection:
    """Build the residual Helmholtz energy of a pure fluid from its list of term
    records.

    Parameters:
        alphar: Term records, as found in ``record["EOS"][0]["alphar"]`` of a fluid
            record.

    Raises:
        MultiFluidModellingError: If the type of any record is not one of
            :data:`PURE_TERM_TYPES`. All types are checked before any term is built.
            Further, if the coefficients of a record are inconsistent.

    Returns:
        A locked collection with one term per record, in the given order.

    """
    for record in alphar:
        type_ = record.get("type")
        if type_ not in PURE_TERM_TYPES:
            raise MultiFluidModellingError(
                f"Bad type: {type_}; allowed types are: {{{','.join(PURE_TERM_TYPES)}}}"
            )

    container = TermCollection()
    for record in alphar:
        container.add_term(_PURE_BUILDERS[record["type"]](record))

    logger.debug(f"Built residual Helmholtz energy with {len(container)} terms.")
    return container.lock()


def get_eos_terms(fluid_record: Mapping[str, Any]) -> TermCollection:
    """Build the residual Helmholtz energy of the first equation of state contained in
    a fluid record.

    Raises:
        MultiFluidModellingError: If the record does not contain an equation of state.

    """
    try:
        alphar = fluid_record["EOS"][0]["alphar"]
    except (KeyError, IndexError, TypeError) as err:
        raise MultiFluidModellingError(
            "Fluid record contains no residual Helmholtz energy at ['EOS'][0]['alphar']."
        ) from err
    return build_eos_terms(alphar)


def _split_composite(
    record: Mapping[str, Any],
) -> tuple[PowerTerm, dict[str, np.ndarray]]:
    """Split a composite departure record into the leading power term and the
    coefficients of the trailing terms."""
    _check_lengths(record, _COMPOSITE_FIELDS)

    size = len(record["n"])
    npower = record.get("Npower")
    if (
        isinstance(npower, bool)
        or not isinstance(npower, (int, np.integer))
        or not 0 <= npower <= size
    ):
        raise MultiFluidModellingError(
            f"Npower must be an integer between 0 and {size} in departure function"
            + f" {record.get('Name')!r}, got {npower!r}."
        )

    if _has_values(record, "l"):
        l_head = np.asarray(record["l"], dtype=float)[:npower]
    else:
        l_head = np.zeros(npower)

    head = PowerTerm(
        n=np.asarray(record["n"], dtype=float)[:npower],
        t=np.asarray(record["t"], dtype=float)[:npower],
        d=np.asarray(record["d"], dtype=float)[:npower],
        l=l_head,
    )
    tail = {f: np.asarray(record[f], dtype=float)[npower:] for f in _COMPOSITE_FIELDS}
    return head, tail


@time_logger(sections=["terms"])
def build_departure_function(record: Mapping[str, Any]) -> TermCollection:
    """Build a departure function from its record.

    The record type determines the structure:

    - ``"Exponential"``: a single :class:`~multifluid.eos.terms.PowerTerm`.
    - ``"GERG-2004"``, ``"GERG-2008"``: the first ``Npower`` coefficients form a power
      term, the remaining ones a :class:`~multifluid.eos.terms.GERG2004Term`.
    - ``"Gaussian+Exponential"``: the first ``Npower`` coefficients form a power term,
      the remaining ones a :class:`~multifluid.eos.terms.GaussianTerm`.
    - ``"none"``: a :class:`~multifluid.eos.terms.NullTerm`.

    Raises:
        MultiFluidModellingError: If the type is not one of :data:`DEPARTURE_TYPES`,
            or if the coefficients are inconsistent.

    Returns:
        A locked collection.

    """
    type_ = record.get("type")
    dep = TermCollection()

    if type_ == "Exponential":
        dep.add_term(build_power_term(record))
    elif type_ in ("GERG-2004", "GERG-2008"):
        head, tail = _split_composite(record)
        dep.add_term(head)
        dep.add_term(GERG2004Term(**tail))
    elif type_ == "Gaussian+Exponential":
        head, tail = _split_composite(record)
        dep.add_term(head)
        dep.add_term(GaussianTerm(**tail))
    elif type_ == "none":
        dep.add_term(NullTerm())
    else:
        raise MultiFluidModellingError(
            f"Bad departure term type: {type_}; allowed types are:"
            + f" {{{','.join(DEPARTURE_TYPES)}}}"
        )

    logger.debug(
        f"Built departure function {record.get('Name')!r} of type {type_!r}"
        + f" with {len(dep)} terms."
    )
    return dep.lock()

"""This module provides functionalities to obtain binary interaction parameters (BIPs)
and departure functions for pairs of components from parsed parameter collections.

A BIP collection is a sequence of records of the form

.. code-block:: python

    {
        "Name1": "Methane", "Name2": "Ethane",
        "betaT": 0.996, "gammaT": 1.006, "betaV": 0.997, "gammaV": 1.004,
        "F": 1.0, "function": "Methane-Ethane",
    }

where ``F`` and ``function`` are optional. Component names are matched
case-insensitively and in either order. The parameters ``betaT`` and ``betaV`` refer to
the order ``(Name1, Name2)`` and are inverted if the pair is requested in reversed
order.

A departure collection is a sequence of departure function records, identified by their
``"Name"`` (see :func:`~multifluid.eos.builders.build_departure_function`).

"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from ..eos.builders import build_departure_function
from ..eos.terms import NullTerm, TermCollection
from ..utils.errors import (
    BinaryPairNotFoundError,
    DepartureFunctionNotFoundError,
    MultiFluidModellingError,
)
from ..utils.logging import time_logger

__all__ = [
    "get_bip_record",
    "get_binary_interaction_double",
    "get_bip_matrices",
    "get_F_matrix",
    "get_departure_function_name",
    "get_departure_function_matrix",
    "get_critical_constants",
]

logger = logging.getLogger(__name__)


_ESTIMATED_BIP: dict[str, float] = {
    "betaT": 1.0,
    "gammaT": 1.0,
    "betaV": 1.0,
    "gammaV": 1.0,
    "F": 0.0,
}
"""Parameters of an ideal (Lorentz-Berthelot type) mixture, used as estimate."""


def _estimate(flags: Optional[Mapping[str, Any]]) -> bool:
    return bool(flags) and bool(flags.get("estimate", False))


def _match(record: Mapping[str, Any], pair: Sequence[str]) -> Optional[bool]:
    """Returns None if the record does not belong to ``pair``, True if it matches in
    reversed order and False if it matches in the given order."""
    name1 = str(record["Name1"]).upper()
    name2 = str(record["Name2"]).upper()
    comp0, comp1 = pair[0].upper(), pair[1].upper()
    if comp0 == name1 and comp1 == name2:
        return False
    elif comp0 == name2 and comp1 == name1:
        return True
    return None


def get_bip_record(
    collection: Sequence[Mapping[str, Any]],
    pair: Sequence[str],
    flags: Optional[Mapping[str, Any]] = None,
) -> Mapping[str, Any]:
    """Find the record of binary interaction parameters for a pair of components.

    Parameters:
        collection: BIP records.
        pair: Names of the two components.
        flags: ``default=None``

            If it contains a truthy ``"estimate"`` entry, pairs which are not found
            in ``collection`` get the parameters of an ideal mixture
            (``beta = gamma = 1``, ``F = 0``) instead of raising an error.

    Raises:
        BinaryPairNotFoundError: If the pair is not in the collection and no estimate
            is requested.

    Returns:
        The first record matching the pair, in the order of ``collection``.

    """
    for record in collection:
        if _match(record, pair) is not None:
            return record

    if _estimate(flags):
        logger.warning(
            f"No binary interaction parameters for pair {tuple(pair)}."
            + " Using estimated parameters of an ideal mixture."
        )
        return dict(_ESTIMATED_BIP)

    raise BinaryPairNotFoundError(pair)


def get_binary_interaction_double(
    collection: Sequence[Mapping[str, Any]],
    pair: Sequence[str],
    flags: Optional[Mapping[str, Any]] = None,
) -> tuple[float, float, float, float]:
    """Get the parameters of the asymmetric reducing function for a pair.

    If the pair is stored in reversed order, ``betaT`` and ``betaV`` are inverted.
    The ``gamma`` parameters are symmetric.

    See :func:`get_bip_record` for the parameters.

    Returns:
        ``betaT, gammaT, betaV, gammaV`` in the order of ``pair``.

    """
    record = get_bip_record(collection, pair, flags)
    betaT = float(record["betaT"])
    gammaT = float(record["gammaT"])
    betaV = float(record["betaV"])
    gammaV = float(record["gammaV"])

    if "Name1" in record and _match(record, pair):
        betaT = 1.0 / betaT
        betaV = 1.0 / betaV
    return betaT, gammaT, betaV, gammaV


@time_logger(sections=["mixing"])
def get_bip_matrices(
    collection: Sequence[Mapping[str, Any]],
    components: Sequence[str],
    flags: Optional[Mapping[str, Any]] = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Assemble the matrices of binary interaction parameters for a mixture.

    The upper triangles are resolved with :func:`get_binary_interaction_double`.
    The lower triangles are filled such that ``beta[j, i] = 1 / beta[i, j]`` and
    ``gamma[j, i] = gamma[i, j]``. The diagonals are one.

    Returns:
        The ``(N, N)`` matrices ``betaT, gammaT, betaV, gammaV``.

    """
    N = len(components)
    betaT, gammaT, betaV, gammaV = (np.eye(N) for _ in range(4))
    for i in range(N):
        for j in range(i + 1, N):
            bT, gT, bV, gV = get_binary_interaction_double(
                collection, (components[i], components[j]), flags
            )
            betaT[i, j], betaT[j, i] = bT, 1.0 / bT
            gammaT[i, j], gammaT[j, i] = gT, gT
            betaV[i, j], betaV[j, i] = bV, 1.0 / bV
            gammaV[i, j], gammaV[j, i] = gV, gV
    return betaT, gammaT, betaV, gammaV


def get_F_matrix(
    collection: Sequence[Mapping[str, Any]],
    components: Sequence[str],
    flags: Optional[Mapping[str, Any]] = None,
) -> np.ndarray:
    """Assemble the symmetric matrix of departure function weights ``F`` with zero
    diagonal. Records without ``F`` give zero."""
    N = len(components)
    F = np.zeros((N, N))
    for i in range(N):
        for j in range(i + 1, N):
            record = get_bip_record(collection, (components[i], components[j]), flags)
            F[i, j] = F[j, i] = float(record.get("F", 0.0))
    return F


def get_departure_function_name(
    collection: Sequence[Mapping[str, Any]],
    pair: Sequence[str],
    flags: Optional[Mapping[str, Any]] = None,
) -> str:
    """Name of the departure function of a pair, or an empty string if the pair has
    none."""
    record = get_bip_record(collection, pair, flags)
    return str(record.get("function") or "")


def _find_departure_record(
    departure_collection: Sequence[Mapping[str, Any]], name: str
) -> Mapping[str, Any]:
    for record in departure_collection:
        if record.get("Name") == name:
            return record
    raise DepartureFunctionNotFoundError(name)


def _null_departure() -> TermCollection:
    return TermCollection([NullTerm()]).lock()


@time_logger(sections=["mixing"])
def get_departure_function_matrix(
    departure_collection: Sequence[Mapping[str, Any]],
    bip_collection: Sequence[Mapping[str, Any]],
    components: Sequence[str],
    flags: Optional[Mapping[str, Any]] = None,
) -> tuple[TermCollection, ...]:
    """Assemble the departure functions of all pairs of a mixture.

    Pairs without a departure function name, or with an empty one, get a vanishing
    departure function, as does the diagonal.

    Parameters:
        departure_collection: Departure function records, identified by ``"Name"``.
        bip_collection: BIP records, referencing departure functions by
            ``"function"``.
        components: Names of the ``N`` components.
        flags: ``default=None``

            See :func:`get_bip_record`.

    Raises:
        DepartureFunctionNotFoundError: If a referenced name is not in
            ``departure_collection``.

    Returns:
        A tuple of ``N * N`` locked collections, stored row-major, i.e. the function of
        pair ``(i, j)`` is at index ``i * N + j``. The matrix is symmetric.

    """
    N = len(components)
    funcs: list[Optional[TermCollection]] = [None] * (N * N)
    for i in range(N):
        funcs[i * N + i] = _null_departure()
        for j in range(i + 1, N):
            name = get_departure_function_name(
                bip_collection, (components[i], components[j]), flags
            )
            if name:
                dep = build_departure_function(
                    _find_departure_record(departure_collection, name)
                )
            else:
                dep = _null_departure()
            # Collections are locked and can be shared by both triangles.
            funcs[i * N + j] = funcs[j * N + i] = dep
    return tuple(f for f in funcs if f is not None)


def _fluid_name(record: Any) -> str:
    info = record.get("INFO") if isinstance(record, Mapping) else None
    if isinstance(info, Mapping):
        return str(info.get("NAME", "<unknown>"))
    return "<unknown>"


def get_critical_constants(
    fluid_records: Sequence[Mapping[str, Any]],
) -> tuple[np.ndarray, np.ndarray]:
    """Read the reducing state of the first equation of state of every fluid record.

    Parameters:
        fluid_records: Parsed fluid records, one per component.

    Raises:
        MultiFluidModellingError: If a record does not contain the reducing state at
            ``["EOS"][0]["STATES"]["reducing"]``.

    Returns:
        The critical temperatures ``Tc`` in ``[K]`` and the critical molar volumes
        ``vc = 1 / rhomolar`` in ``[m^3 / mol]``.

    """
    Tc, vc = [], []
    for record in fluid_records:
        try:
            reducing = record["EOS"][0]["STATES"]["reducing"]
            Tc.append(float(reducing["T"]))
            vc.append(1.0 / float(reducing["rhomolar"]))
        except (KeyError, IndexError, TypeError) as err:
            name = _fluid_name(record)
            raise MultiFluidModellingError(
                f"Fluid record {name!r} contains no reducing state at"
                + " ['EOS'][0]['STATES']['reducing']."
            ) from err
    return np.array(Tc), np.array(vc)

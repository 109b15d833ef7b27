"""Model adapters, i.e. mixture models reusing the pure fluids of an existing model
with a new reducing function and new departure functions.

The new parameters are given by an override document of the form

.. code-block:: python

    {
        "0": {
            "1": {
                "BIP": {"betaT": 1.0, "gammaT": 1.0, "betaV": 1.0, "gammaV": 1.0,
                        "Fij": 1.0},
                "departure": {"Name": "...", "type": "Exponential", ...},
            },
        },
    }

with one entry ``overrides[str(i)][str(j)]`` for every pair ``i < j`` of components.
The departure records are described in
:func:`~multifluid.eos.builders.build_departure_function`.

"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Union

import numpy as np

from ..eos.builders import build_departure_function
from ..eos.terms import NullTerm, TermCollection
from ..mixing.contributions import DepartureContribution
from ..mixing.reducing import (
    MultiFluidInvariantReducingFunction,
    MultiFluidReducingFunction,
)
from ..utils.errors import MultiFluidModellingError
from ..utils.logging import time_logger
from .multifluid import Contribution, MultiFluidBase, ReducingFunction

__all__ = [
    "MultiFluidAdapter",
    "build_multifluid_mutant",
    "build_multifluid_mutant_invariant",
]

logger = logging.getLogger(__name__)


class MultiFluidAdapter(MultiFluidBase):
    """A mixture model with the corresponding-states contribution of a base model, but
    its own reducing function and departure contribution.

    The base model is not modified.

    Parameters:
        base: A model providing ``corr`` and ``R``.
        redfunc: The new reducing function.
        depfunc: The new departure contribution.

    """

    def __init__(
        self,
        base: MultiFluidBase,
        redfunc: ReducingFunction,
        depfunc: Contribution,
    ) -> None:
        super().__init__()
        self.base: MultiFluidBase = base
        self.redfunc: ReducingFunction = redfunc
        self.depfunc: Contribution = depfunc

    @property
    def corr(self) -> Contribution:  # type: ignore[override]
        """The corresponding-states contribution of the base model."""
        return self.base.corr

    def get_departure(self) -> Contribution:
        return self.depfunc

    def R(self, molefrac=None) -> float:
        return self.base.R(molefrac)


def _parse_overrides(
    overrides: Union[str, Mapping[str, Any]], N: int
) -> Mapping[str, Any]:
    """Parse the override document and check that it contains exactly the pairs
    ``i < j`` of ``N`` components."""
    if isinstance(overrides, str):
        overrides = json.loads(overrides)

    expected = {(str(i), str(j)) for i in range(N) for j in range(i + 1, N)}
    try:
        given = {(i, j) for i, row in overrides.items() for j in row}
    except (AttributeError, TypeError) as err:
        raise MultiFluidModellingError(
            "Overrides must be a mapping of mappings, keyed by component indices."
        ) from err

    missing = sorted(expected - given)
    surplus = sorted(given - expected)
    if missing or surplus:
        raise MultiFluidModellingError(
            f"Overrides for {N} components must contain the pairs i < j only."
            + f" Missing: {missing}, surplus: {surplus}."
        )
    return overrides


def _get_bip_value(bip: Mapping[str, Any], key: str, pair: tuple[int, int]) -> float:
    try:
        return float(bip[key])
    except KeyError as err:
        raise MultiFluidModellingError(
            f"Parameter {key!r} missing in overrides of pair {pair}."
        ) from err


def _build_departure(
    overrides: Mapping[str, Any], N: int, keys: tuple[str, ...]
) -> tuple[dict[str, np.ndarray], DepartureContribution]:
    """Assemble the departure contribution and the upper triangles of the parameters
    ``keys`` from the override document."""
    params = {key: np.zeros((N, N)) for key in keys}
    F = np.zeros((N, N))
    funcs: list[TermCollection] = [TermCollection([NullTerm()]).lock()] * (N * N)

    for i in range(N):
        for j in range(i + 1, N):
            entry = overrides[str(i)][str(j)]
            bip = entry.get("BIP", {})
            for key in keys:
                params[key][i, j] = _get_bip_value(bip, key, (i, j))
            F[i, j] = F[j, i] = _get_bip_value(bip, "Fij", (i, j))

            if "departure" not in entry:
                raise MultiFluidModellingError(
                    f"Departure function missing in overrides of pair {(i, j)}."
                )
            dep = build_departure_function(entry["departure"])
            funcs[i * N + j] = funcs[j * N + i] = dep

    return params, DepartureContribution(F, funcs)


@time_logger(sections=["models"])
def build_multifluid_mutant(
    model: MultiFluidBase, overrides: Union[str, Mapping[str, Any]]
) -> MultiFluidAdapter:
    """Create an adapter of ``model`` with new parameters of the asymmetric reducing
    function and new departure functions for all pairs.

    The critical constants are taken from the reducing function of ``model``, which
    must be a :class:`~multifluid.mixing.reducing.MultiFluidReducingFunction`. For
    every pair ``i < j``, ``betaT``, ``gammaT``, ``betaV``, ``gammaV`` and ``Fij`` are
    read from the ``"BIP"`` entry of the overrides. The transposed entries are
    ``beta[j, i] = 1 / beta[i, j]`` and ``gamma[j, i] = gamma[i, j]``.

    Parameters:
        model: The base model, which is not modified.
        overrides: The override document, as mapping or JSON string.

    Raises:
        MultiFluidModellingError: If the overrides do not contain exactly the pairs
            of the model, or if entries are invalid.

    Returns:
        The adapter, with the JSON dump of the overrides as metadata.

    """
    red = model.redfunc
    if not isinstance(red, MultiFluidReducingFunction):
        raise MultiFluidModellingError(
            "Base model must have the asymmetric reducing function,"
            + f" got {type(red).__name__}."
        )
    N = red.num_components
    overrides = _parse_overrides(overrides, N)

    params, newdep = _build_departure(
        overrides, N, ("betaT", "gammaT", "betaV", "gammaV")
    )
    betaT = np.array(red.betaT)
    gammaT = np.array(red.gammaT)
    betaV = np.array(red.betaV)
    gammaV = np.array(red.gammaV)
    for i in range(N):
        for j in range(i + 1, N):
            betaT[i, j] = params["betaT"][i, j]
            betaT[j, i] = 1.0 / betaT[i, j]
            betaV[i, j] = params["betaV"][i, j]
            betaV[j, i] = 1.0 / betaV[i, j]
            gammaT[i, j] = gammaT[j, i] = params["gammaT"][i, j]
            gammaV[i, j] = gammaV[j, i] = params["gammaV"][i, j]

    newred = MultiFluidReducingFunction(betaT, gammaT, betaV, gammaV, red.Tc, red.vc)
    mfa = MultiFluidAdapter(model, newred, newdep)
    mfa.set_meta(json.dumps(overrides))

    logger.debug(f"Created multi-fluid adapter for {N} components.")
    return mfa


@time_logger(sections=["models"])
def build_multifluid_mutant_invariant(
    model: MultiFluidBase, overrides: Union[str, Mapping[str, Any]]
) -> MultiFluidAdapter:
    """Create an adapter of a binary ``model`` with the invariant reducing function
    and a new departure function.

    The parameters ``phiT``, ``lambdaT``, ``phiV``, ``lambdaV`` and ``Fij`` are read
    from the ``"BIP"`` entry of pair ``(0, 1)``. The matrices are completed such that
    ``phi`` is symmetric with unit diagonal and ``lambda`` antisymmetric with zero
    diagonal.

    See :func:`build_multifluid_mutant` for the parameters.

    Raises:
        MultiFluidModellingError: If the base model is not binary, or if the
            overrides are invalid.

    """
    red = model.redfunc
    Tc = getattr(red, "Tc", None)
    vc = getattr(red, "vc", None)
    if Tc is None or vc is None:
        raise MultiFluidModellingError(
            "Base model must have a reducing function with critical constants."
        )
    N = len(Tc)
    if N != 2:
        raise MultiFluidModellingError(
            "Only binary mixtures are supported with invariant departure functions."
        )
    overrides = _parse_overrides(overrides, N)

    params, newdep = _build_departure(
        overrides, N, ("phiT", "lambdaT", "phiV", "lambdaV")
    )
    phiT, phiV = np.ones((N, N)), np.ones((N, N))
    lambdaT, lambdaV = np.zeros((N, N)), np.zeros((N, N))
    for i in range(N):
        for j in range(i + 1, N):
            phiT[i, j] = phiT[j, i] = params["phiT"][i, j]
            phiV[i, j] = phiV[j, i] = params["phiV"][i, j]
            lambdaT[i, j] = params["lambdaT"][i, j]
            lambdaT[j, i] = -lambdaT[i, j]
            lambdaV[i, j] = params["lambdaV"][i, j]
            lambdaV[j, i] = -lambdaV[i, j]

    newred = MultiFluidInvariantReducingFunction(phiT, lambdaT, phiV, lambdaV, Tc, vc)
    mfa = MultiFluidAdapter(model, newred, newdep)
    mfa.set_meta(json.dumps(overrides))

    logger.debug("Created invariant multi-fluid adapter for a binary mixture.")
    return mfa

"""The two contributions to the residual Helmholtz energy of a multi-fluid mixture.

With reduced temperature :math:`\\tau` and density :math:`\\delta` evaluated by the
reducing function of the mixture,

.. math::

    \\alpha^r(\\tau, \\delta, z) = \\sum_i z_i \\alpha^r_{0i}(\\tau, \\delta)
    + \\sum_{i < j} z_i z_j F_{ij} \\alpha^r_{ij}(\\tau, \\delta)~,

where the first sum is the corresponding-states contribution of the pure fluids and the
second the departure contribution of the binary pairs.

"""

from __future__ import annotations

from typing import Sequence

import numpy as np

import multifluid.ad.functions as af

from ..eos.terms import TermCollection
from ..utils.common import readonly_array, safe_sum
from ..utils.errors import MultiFluidModellingError

__all__ = [
    "CorrespondingStatesContribution",
    "DepartureContribution",
]


def _locked(funcs: Sequence[TermCollection]) -> tuple[TermCollection, ...]:
    """Lock all term collections, such that the contributions are immutable. Other
    evaluators are kept as they are."""
    return tuple(f.lock() if isinstance(f, TermCollection) else f for f in funcs)


class CorrespondingStatesContribution:
    """The mole-fraction weighted sum of the pure fluid residual Helmholtz energies.

    Parameters:
        EOSs: One term collection per component. The collections are locked.

    """

    def __init__(self, EOSs: Sequence[TermCollection]) -> None:
        self._EOSs: tuple[TermCollection, ...] = _locked(EOSs)

    @property
    def num_components(self) -> int:
        return len(self._EOSs)

    def get_EOS(self, i: int) -> TermCollection:
        """Residual Helmholtz energy of component ``i``."""
        return self._EOSs[i]

    def alphari(self, tau, delta, i: int):
        """Residual Helmholtz energy of component ``i`` at the reduced state of the
        mixture."""
        return af.forceeval(self._EOSs[i].alphar(tau, delta))

    def alphar(self, tau, delta, molefracs):
        return af.forceeval(
            safe_sum(
                [
                    molefracs[i] * af.forceeval(EOS.alphar(tau, delta))
                    for i, EOS in enumerate(self._EOSs)
                ]
            )
        )


class DepartureContribution:
    """The departure contribution of all binary pairs.

    Parameters:
        F: ``shape=(N, N)``

            Symmetric weights of the departure functions. Pairs with zero weight are
            not evaluated.
        funcs: ``len=N*N``

            Departure functions stored row-major, i.e. the function of pair
            ``(i, j)`` at index ``i * N + j``. See
            :func:`~multifluid.mixing.bip.get_departure_function_matrix`.
            The collections are locked.

    Raises:
        MultiFluidModellingError: If ``F`` is not square, or the number of departure
            functions does not match.

    """

    def __init__(self, F: np.ndarray, funcs: Sequence[TermCollection]) -> None:
        self.F: np.ndarray = readonly_array(F)
        N = self.F.shape[0]
        if self.F.shape != (N, N):
            raise MultiFluidModellingError(
                f"Matrix F must be square, got shape {self.F.shape}."
            )
        if len(funcs) != N * N:
            raise MultiFluidModellingError(
                f"Expected {N * N} departure functions for {N} components,"
                + f" got {len(funcs)}."
            )
        self._funcs: tuple[TermCollection, ...] = _locked(funcs)

    @property
    def num_components(self) -> int:
        return self.F.shape[0]

    def get_function(self, i: int, j: int) -> TermCollection:
        """Departure function of the pair ``(i, j)``."""
        return self._funcs[i * self.num_components + j]

    def alphar(self, tau, delta, molefracs):
        N = self.num_components
        return af.forceeval(
            safe_sum(
                [
                    molefracs[i]
                    * molefracs[j]
                    * self.F[i, j]
                    * af.forceeval(self._funcs[i * N + j].alphar(tau, delta))
                    for i in range(N)
                    for j in range(i + 1, N)
                    if self.F[i, j] != 0.0
                ]
            )
        )

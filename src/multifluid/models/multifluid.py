"""The multi-fluid mixture model and its assembly from parameter collections.

A :class:`MultiFluid` model combines

1. a reducing function, providing :math:`T_r(z)` and :math:`\\rho_r(z)`,
2. the corresponding-states contribution of the pure fluids,
3. the departure contribution of the binary pairs,

and evaluates the residual reduced Helmholtz energy

.. math::

    \\alpha^r(T, \\rho, z) = \\alpha^r_{cs}(\\tau, \\delta, z)
    + \\alpha^r_{dep}(\\tau, \\delta, z)~,~
    \\tau = \\frac{T_r(z)}{T}~,~\\delta = \\frac{\\rho}{\\rho_r(z)}~.

Models are immutable after construction, except for a metadata string which can be set
once. All evaluation methods accept the scalar types of :mod:`multifluid.ad.functions`,
hence derivatives are obtained by passing
:class:`~multifluid.ad.forward_mode.AdArray` instances.

"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol, Sequence

import multifluid.ad.functions as af

from .._core import R_IDEAL_MOL
from ..eos.builders import get_eos_terms
from ..mixing.bip import (
    get_bip_matrices,
    get_critical_constants,
    get_departure_function_matrix,
    get_F_matrix,
)
from ..mixing.contributions import (
    CorrespondingStatesContribution,
    DepartureContribution,
)
from ..mixing.reducing import MultiFluidReducingFunction
from ..utils.common import safe_sum
from ..utils.errors import MultiFluidModellingError
from ..utils.logging import time_logger

__all__ = [
    "ReducingFunction",
    "MultiFluid",
    "build_multifluid_model",
]

logger = logging.getLogger(__name__)


class ReducingFunction(Protocol):
    """Interface of reducing functions, as required by the mixture models."""

    def get_Tr(self, z) -> Any:
        ...

    def get_rhor(self, z) -> Any:
        ...


class Contribution(Protocol):
    """Interface of the corresponding-states and departure contributions."""

    def alphar(self, tau, delta, molefracs) -> Any:
        ...


class MultiFluidBase:
    """Evaluation logic shared by :class:`MultiFluid` and
    :class:`~multifluid.models.adapter.MultiFluidAdapter`.

    Derived classes provide the attributes :attr:`redfunc`, :attr:`corr` and the
    departure contribution returned by :meth:`get_departure`.

    """

    redfunc: ReducingFunction
    corr: Contribution

    def __init__(self) -> None:
        self._meta: str = ""
        self._meta_set: bool = False

    def get_departure(self) -> Contribution:
        """The departure contribution of the model."""
        raise NotImplementedError

    def R(self, molefrac=None) -> float:
        """The molar gas constant in ``[J / K mol]``, independent of composition."""
        return R_IDEAL_MOL

    def set_meta(self, meta: str) -> None:
        """Store arbitrary metadata in string form, e.g. a JSON representation of the
        model.

        Raises:
            MultiFluidModellingError: If the metadata was already set.

        """
        if self._meta_set:
            raise MultiFluidModellingError("Metadata of a model can only be set once.")
        self._meta = str(meta)
        self._meta_set = True

    def get_meta(self) -> str:
        """The stored metadata, an empty string if never set."""
        return self._meta

    @property
    def meta(self) -> str:
        """See :meth:`get_meta`."""
        return self._meta

    def alphar(self, T, rho, molefrac):
        """Residual reduced Helmholtz energy.

        Parameters:
            T: Temperature in ``[K]``.
            rho: Molar density in ``[mol / m^3]``.
            molefrac: ``len=N``

                Mole fractions of the components.

        """
        Tred = af.forceeval(self.redfunc.get_Tr(molefrac))
        rhored = af.forceeval(self.redfunc.get_rhor(molefrac))
        delta = af.forceeval(rho / rhored)
        tau = af.forceeval(Tred / T)
        val = self.corr.alphar(tau, delta, molefrac) + self.get_departure().alphar(
            tau, delta, molefrac
        )
        return af.forceeval(val)

    def alphar_rhovec(self, T, rhovec: Sequence, rhotot=None):
        """Residual reduced Helmholtz energy in terms of the partial molar densities.

        Parameters:
            T: Temperature in ``[K]``.
            rhovec: ``len=N``

                Molar densities of the components in ``[mol / m^3]``.
            rhotot: ``default=None``

                Total molar density. If None, the sum of ``rhovec`` is used.

        """
        rhotot_ = safe_sum(list(rhovec)) if rhotot is None else rhotot
        molefrac = [rho_i / rhotot_ for rho_i in rhovec]
        return self.alphar(T, rhotot_, molefrac)


class MultiFluid(MultiFluidBase):
    """A multi-fluid mixture model.

    Parameters:
        redfunc: The reducing function.
        corr: The corresponding-states contribution.
        dep: The departure contribution.

    """

    def __init__(
        self,
        redfunc: ReducingFunction,
        corr: Contribution,
        dep: Contribution,
    ) -> None:
        super().__init__()
        self.redfunc: ReducingFunction = redfunc
        self.corr: Contribution = corr
        self.dep: Contribution = dep

    def get_departure(self) -> Contribution:
        return self.dep


@time_logger(sections=["models"])
def build_multifluid_model(
    components: Sequence[str],
    fluid_records: Sequence[Mapping[str, Any]],
    bip_collection: Sequence[Mapping[str, Any]],
    departure_collection: Sequence[Mapping[str, Any]],
    flags: Optional[Mapping[str, Any]] = None,
) -> MultiFluid:
    """Assemble a multi-fluid model with the asymmetric reducing function from parsed
    parameter collections.

    Parameters:
        components: ``len=N``

            Names of the components, as used in ``bip_collection``.
        fluid_records: ``len=N``

            Parsed fluid records, in the order of ``components``.
        bip_collection: Records of binary interaction parameters.
        departure_collection: Records of departure functions.
        flags: ``default=None``

            Options for the resolution of binary interaction parameters, see
            :func:`~multifluid.mixing.bip.get_bip_record`.

    Raises:
        MultiFluidModellingError: If the number of fluid records does not match the
            number of components, or if any record is invalid.

    """
    if len(fluid_records) != len(components):
        raise MultiFluidModellingError(
            f"Got {len(fluid_records)} fluid records for {len(components)} components."
        )

    betaT, gammaT, betaV, gammaV = get_bip_matrices(bip_collection, components, flags)
    Tc, vc = get_critical_constants(fluid_records)
    redfunc = MultiFluidReducingFunction(betaT, gammaT, betaV, gammaV, Tc, vc)

    corr = CorrespondingStatesContribution(
        [get_eos_terms(record) for record in fluid_records]
    )
    dep = DepartureContribution(
        get_F_matrix(bip_collection, components, flags),
        get_departure_function_matrix(
            departure_collection, bip_collection, components, flags
        ),
    )

    logger.info(f"Created multi-fluid model for components {list(components)}.")
    return MultiFluid(redfunc, corr, dep)

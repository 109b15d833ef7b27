"""Reducing functions for the temperature and density of a mixture.

The reduced temperature and density of a multi-fluid model are
:math:`\\tau = T_r(z) / T` and :math:`\\delta = \\rho / \\rho_r(z)`, where the
reducing temperature :math:`T_r` and density :math:`\\rho_r` are quadratic (or cubic)
mixing rules of the critical temperatures :math:`T_{c,i}` and molar volumes
:math:`v_{c,i}` of the components.

Two reducing functions are implemented:

1. :class:`MultiFluidReducingFunction`, the asymmetric mixing rule of Kunz and Wagner
   (GERG-2004 and GERG-2008), for an arbitrary number of components.
2. :class:`MultiFluidInvariantReducingFunction`, the mixing rule of Bell and Lemmon,
   which is invariant under splitting a component into identical sub-components.
   Only binary mixtures are supported.

The fractions ``z`` can be given as any sequence of scalars supported by
:mod:`multifluid.ad.functions`.

"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..ad.forward_mode import AdArray
from ..utils.common import readonly_array, safe_sum
from ..utils.errors import MultiFluidModellingError
from ..utils.logging import time_logger

__all__ = [
    "MultiFluidReducingFunction",
    "MultiFluidInvariantReducingFunction",
]

logger = logging.getLogger(__name__)


def _square_matrix(values, N: int, name: str) -> np.ndarray:
    mat = readonly_array(values)
    if mat.shape != (N, N):
        raise MultiFluidModellingError(
            f"Matrix {name} must be of shape {(N, N)}, got {mat.shape}."
        )
    return mat


def _off_diagonal(N: int) -> np.ndarray:
    return ~np.eye(N, dtype=bool)


def _is_zero(x) -> bool:
    """True if the scalar value of ``x`` is exactly zero. Arrays are never zero."""
    val = x.val if isinstance(x, AdArray) else x
    return np.ndim(val) == 0 and val == 0.0


class MultiFluidReducingFunction:
    """The asymmetric reducing function of GERG-2004.

    For a quantity :math:`Y \\in \\{T, v\\}`

    .. math::

        Y_r(z) = \\sum_i z_i^2 Y_{c,i}
        + 2 \\sum_{i < j} z_i z_j \\frac{z_i + z_j}{\\beta_{ij}^2 z_i + z_j} Y_{ij}~,

    with the cross coefficients

    .. math::

        T_{ij} = \\beta_{T,ij} \\gamma_{T,ij} \\sqrt{T_{c,i} T_{c,j}}~,~
        v_{ij} = \\frac{1}{8} \\beta_{v,ij} \\gamma_{v,ij}
        (v_{c,i}^{1/3} + v_{c,j}^{1/3})^3~.

    The reducing density is :math:`\\rho_r = 1 / v_r`.

    Parameters:
        betaT: ``shape=(N, N)``

            Asymmetry parameters for the temperature, with
            ``betaT[i, j] * betaT[j, i] == 1``.
        gammaT: ``shape=(N, N)``

            Symmetric interaction parameters for the temperature.
        betaV: ``shape=(N, N)``

            Asymmetry parameters for the volume, with
            ``betaV[i, j] * betaV[j, i] == 1``.
        gammaV: ``shape=(N, N)``

            Symmetric interaction parameters for the volume.
        Tc: ``shape=(N,)``

            Critical temperatures of the components in ``[K]``.
        vc: ``shape=(N,)``

            Critical molar volumes of the components in ``[m^3 / mol]``.

    Raises:
        MultiFluidModellingError: If the shapes are inconsistent, or if the
            parameters violate the symmetries stated above (off the diagonal).

    """

    @time_logger(sections=["mixing"])
    def __init__(
        self,
        betaT: np.ndarray,
        gammaT: np.ndarray,
        betaV: np.ndarray,
        gammaV: np.ndarray,
        Tc: Sequence[float] | np.ndarray,
        vc: Sequence[float] | np.ndarray,
    ) -> None:
        self.Tc: np.ndarray = readonly_array(Tc)
        self.vc: np.ndarray = readonly_array(vc)

        N = self.Tc.size
        if self.Tc.ndim != 1 or self.vc.shape != (N,):
            raise MultiFluidModellingError(
                f"Tc and vc must be 1D of equal size, got {self.Tc.shape} and"
                + f" {self.vc.shape}."
            )

        self.betaT: np.ndarray = _square_matrix(betaT, N, "betaT")
        self.gammaT: np.ndarray = _square_matrix(gammaT, N, "gammaT")
        self.betaV: np.ndarray = _square_matrix(betaV, N, "betaV")
        self.gammaV: np.ndarray = _square_matrix(gammaV, N, "gammaV")

        off = _off_diagonal(N)
        for name, beta in (("betaT", self.betaT), ("betaV", self.betaV)):
            if not np.allclose((beta * beta.T)[off], 1.0, rtol=1e-12, atol=0.0):
                raise MultiFluidModellingError(
                    f"{name} must satisfy {name}[i, j] * {name}[j, i] == 1."
                )
        for name, gamma in (("gammaT", self.gammaT), ("gammaV", self.gammaV)):
            if not np.allclose(gamma[off], gamma.T[off], rtol=1e-12, atol=0.0):
                raise MultiFluidModellingError(f"{name} must be symmetric.")

        self.YT: np.ndarray = readonly_array(
            self.betaT * self.gammaT * np.sqrt(np.outer(self.Tc, self.Tc))
        )
        cbrt_vc = np.cbrt(self.vc)
        self.Yv: np.ndarray = readonly_array(
            1.0 / 8.0 * self.betaV * self.gammaV * np.add.outer(cbrt_vc, cbrt_vc) ** 3
        )

        logger.debug(f"Created asymmetric reducing function for {N} components.")

    @property
    def num_components(self) -> int:
        return self.Tc.size

    @staticmethod
    def Y(z, Yc: np.ndarray, beta: np.ndarray, Yij: np.ndarray):
        """Evaluate the asymmetric mixing rule for the fractions ``z``.

        Parameters:
            z: ``len=N``

                Fractions of the components.
            Yc: ``shape=(N,)``

                Pure component values.
            beta: ``shape=(N, N)``

                Asymmetry parameters.
            Yij: ``shape=(N, N)``

                Cross coefficients.

        """
        N = len(z)
        sum1 = safe_sum([z[i] * z[i] * Yc[i] for i in range(N)])
        sum2 = safe_sum(
            [
                z[i] * z[j] * (z[i] + z[j]) / (beta[i, j] ** 2 * z[i] + z[j]) * Yij[i, j]
                for i in range(N - 1)
                for j in range(i + 1, N)
                # Vanishing pairs are of second order in z and would give 0 / 0.
                if not (_is_zero(z[i]) and _is_zero(z[j]))
            ]
        )
        return sum1 + 2.0 * sum2

    def get_Tr(self, z):
        """Reducing temperature in ``[K]``."""
        return self.Y(z, self.Tc, self.betaT, self.YT)

    def get_rhor(self, z):
        """Reducing molar density in ``[mol / m^3]``."""
        return 1.0 / self.Y(z, self.vc, self.betaV, self.Yv)


class MultiFluidInvariantReducingFunction:
    """The invariant reducing function of Bell and Lemmon for binary mixtures.

    For a quantity :math:`Y \\in \\{T, v\\}`

    .. math::

        Y_r(z) = \\sum_i \\sum_j z_i z_j (\\phi_{ij} + z_j \\lambda_{ij}) Y_{ij}~,

    with the symmetric cross coefficients :math:`T_{ij} = \\sqrt{T_{c,i} T_{c,j}}` and
    :math:`v_{ij} = \\frac{1}{8} (v_{c,i}^{1/3} + v_{c,j}^{1/3})^3`.
    The reducing density is :math:`\\rho_r = 1 / v_r`.

    Parameters:
        phiT: ``shape=(2, 2)``

            Symmetric quadratic parameters for the temperature. If None, ones are used.
        lambdaT: ``shape=(2, 2)``

            Antisymmetric cubic parameters for the temperature. If None, zeros are used.
        phiV: ``shape=(2, 2)``

            Symmetric quadratic parameters for the volume. If None, ones are used.
        lambdaV: ``shape=(2, 2)``

            Antisymmetric cubic parameters for the volume. If None, zeros are used.
        Tc: ``shape=(2,)``

            Critical temperatures of the components in ``[K]``.
        vc: ``shape=(2,)``

            Critical molar volumes of the components in ``[m^3 / mol]``.

    Raises:
        MultiFluidModellingError: If the mixture is not binary, if shapes are
            inconsistent, if ``phi`` is not symmetric or ``lambda`` not
            antisymmetric.

    """

    @time_logger(sections=["mixing"])
    def __init__(
        self,
        phiT: Optional[np.ndarray],
        lambdaT: Optional[np.ndarray],
        phiV: Optional[np.ndarray],
        lambdaV: Optional[np.ndarray],
        Tc: Sequence[float] | np.ndarray,
        vc: Sequence[float] | np.ndarray,
    ) -> None:
        self.Tc: np.ndarray = readonly_array(Tc)
        self.vc: np.ndarray = readonly_array(vc)

        N = self.Tc.size
        if N != 2:
            raise MultiFluidModellingError(
                f"Invariant reducing function only implemented for 2 components, got {N}."
            )
        if self.vc.shape != (N,):
            raise MultiFluidModellingError(
                f"vc must be of shape {(N,)}, got {self.vc.shape}."
            )

        ones, zeros = np.ones((N, N)), np.zeros((N, N))
        self.phiT: np.ndarray = _square_matrix(
            ones if phiT is None else phiT, N, "phiT"
        )
        self.lambdaT: np.ndarray = _square_matrix(
            zeros if lambdaT is None else lambdaT, N, "lambdaT"
        )
        self.phiV: np.ndarray = _square_matrix(
            ones if phiV is None else phiV, N, "phiV"
        )
        self.lambdaV: np.ndarray = _square_matrix(
            zeros if lambdaV is None else lambdaV, N, "lambdaV"
        )

        for name, phi in (("phiT", self.phiT), ("phiV", self.phiV)):
            if not np.allclose(phi, phi.T, rtol=1e-12, atol=0.0):
                raise MultiFluidModellingError(f"{name} must be symmetric.")
        for name, lam in (("lambdaT", self.lambdaT), ("lambdaV", self.lambdaV)):
            if not np.allclose(lam, -lam.T, rtol=1e-12, atol=0.0):
                raise MultiFluidModellingError(f"{name} must be antisymmetric.")

        self.YT: np.ndarray = readonly_array(np.sqrt(np.outer(self.Tc, self.Tc)))
        cbrt_vc = np.cbrt(self.vc)
        self.Yv: np.ndarray = readonly_array(
            1.0 / 8.0 * np.add.outer(cbrt_vc, cbrt_vc) ** 3
        )

        logger.debug("Created invariant reducing function for a binary mixture.")

    @property
    def num_components(self) -> int:
        return self.Tc.size

    @staticmethod
    def Y(z, phi: np.ndarray, lambda_: np.ndarray, Yij: np.ndarray):
        """Evaluate the invariant mixing rule for the fractions ``z``."""
        N = len(z)
        return safe_sum(
            [
                z[i] * z[j] * (phi[i, j] + z[j] * lambda_[i, j]) * Yij[i, j]
                for i in range(N)
                for j in range(N)
            ]
        )

    def get_Tr(self, z):
        """Reducing temperature in ``[K]``."""
        return self.Y(z, self.phiT, self.lambdaT, self.YT)

    def get_rhor(self, z):
        """Reducing molar density in ``[mol / m^3]``."""
        return 1.0 / self.Y(z, self.phiV, self.lambdaV, self.Yv)

"""Forward-mode automatic differentiation for the evaluation of Helmholtz energy terms.

An :class:`AdArray` carries a value and the derivatives of that value with respect to
a fixed set of independent variables. The arithmetic overloads implement the chain
rule, such that every closed-form term in :mod:`multifluid.eos` can be evaluated with
an :class:`AdArray` in place of a float and returns the gradient alongside the value.

Two storage layouts are supported:

1. Scalar values (the common case when evaluating a model at one state). The value is a
   float and the Jacobian is a dense 1D array of length ``num_variables``.
2. Vector values (vectorized evaluation over many states). The value is a 1D array of
   length ``m`` and the Jacobian a sparse ``(m, num_variables)`` matrix.

Both layouts are created by :func:`initAdArrays`. Mixing the two layouts in one
expression is not supported.

"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
import scipy.sparse as sps

__all__ = ["AdArray", "initAdArrays"]


def initAdArrays(variables: Sequence[Union[float, np.ndarray]]) -> list[AdArray]:
    """Initialize a set of independent variables.

    The Jacobian of each returned variable is the identity with respect to itself and
    zero with respect to all others.

    Parameters:
        variables: Values of the independent variables. Either all floats, which gives
            scalar AdArrays with dense gradients, or all 1D arrays, which gives
            vector AdArrays with sparse block Jacobians.

    Raises:
        ValueError: If floats and arrays are mixed.

    Returns:
        One AdArray per entry in ``variables``.

    """
    scalar = [np.ndim(v) == 0 for v in variables]

    if all(scalar):
        num_var = len(variables)
        eye = np.eye(num_var)
        return [AdArray(float(v), eye[i].copy()) for i, v in enumerate(variables)]

    if any(scalar):
        raise ValueError("Cannot mix scalar and array valued independent variables.")

    num_val = [np.asarray(v).size for v in variables]
    ad_arrays = []
    for i, val in enumerate(variables):
        # zero blocks except the identity for variable i
        n = num_val[i]
        jac = [sps.csr_matrix((n, m)) for m in num_val]
        jac[i] = sps.identity(n, format="csr")
        ad_arrays.append(
            AdArray(np.asarray(val, dtype=float), sps.bmat([jac], format="csr"))
        )

    return ad_arrays


class AdArray:
    """A value together with its derivatives.

    Numpy is instructed to defer to the overloads of this class
    (``__array_ufunc__ = None``), such that expressions like
    ``np.float64(2.0) * ad`` are dispatched to :meth:`__rmul__` instead of producing
    object arrays. Elementary functions must be called through
    :mod:`multifluid.ad.functions`.

    Parameters:
        val: Value, a float or a 1D array.
        jac: Derivatives of ``val``. A dense 1D array for scalar values, a sparse
            matrix with one row per value otherwise.

    """

    __array_ufunc__ = None

    def __init__(self, val=0.0, jac=0.0) -> None:
        self.val = val
        self.jac = jac

    def __repr__(self) -> str:
        return f"AdArray(val={self.val!r}, jac={self.jac!r})"

    def __add__(self, other):
        b = _cast(other)
        return AdArray(self.val + b.val, self.jac + b.jac)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        b = _cast(other)
        return AdArray(self.val - b.val, self.jac - b.jac)

    def __rsub__(self, other):
        return -self.__sub__(other)

    def __mul__(self, other):
        if not isinstance(other, AdArray):
            return AdArray(self.val * other, self.diagvec_mul_jac(other))
        val = self.val * other.val
        jac = self.diagvec_mul_jac(other.val) + other.diagvec_mul_jac(self.val)
        return AdArray(val, jac)

    def __rmul__(self, other):
        if isinstance(other, AdArray):
            # other is an AdArray, so __mul__ should have been called
            raise RuntimeError("Something went horribly wrong")
        return self.__mul__(other)

    def __pow__(self, other):
        if not isinstance(other, AdArray):
            val = self.val**other
            jac = self.diagvec_mul_jac(other * self.val ** (other - 1))
        else:
            val = self.val**other.val
            jac = self.diagvec_mul_jac(
                other.val * self.val ** (other.val - 1)
            ) + other.diagvec_mul_jac(val * np.log(self.val))
        return AdArray(val, jac)

    def __rpow__(self, other):
        if isinstance(other, AdArray):
            raise ValueError("Something went horribly wrong, should have called __pow__")
        val = other**self.val
        return AdArray(val, self.diagvec_mul_jac(val * np.log(other)))

    def __truediv__(self, other):
        if not isinstance(other, AdArray):
            return self * (1.0 / other)
        return self * other**-1

    def __rtruediv__(self, other):
        return other * self**-1

    def __neg__(self):
        return AdArray(-self.val, -self.jac)

    def __pos__(self):
        return self.copy()

    # Comparisons act on the value only.
    def __lt__(self, other):
        return self.val < _value(other)

    def __le__(self, other):
        return self.val <= _value(other)

    def __gt__(self, other):
        return self.val > _value(other)

    def __ge__(self, other):
        return self.val >= _value(other)

    def __float__(self) -> float:
        return float(self.val)

    def copy(self) -> AdArray:
        b = AdArray()
        try:
            b.val = self.val.copy()
        except AttributeError:
            b.val = self.val
        try:
            b.jac = self.jac.copy()
        except AttributeError:
            b.jac = self.jac
        return b

    def diagvec_mul_jac(self, a):
        """Multiply the Jacobian from the left with ``diag(a)``.

        For scalar values this is a plain scaling of the gradient.

        """
        if np.ndim(self.val) == 0:
            return a * self.jac
        if np.ndim(a) == 0:
            return self.jac * a
        return sps.diags(a) @ self.jac

    def full_jac(self) -> np.ndarray:
        """The Jacobian as a dense array."""
        if sps.issparse(self.jac):
            return self.jac.toarray()
        return np.asarray(self.jac)


def _value(var):
    if isinstance(var, AdArray):
        return var.val
    return var


def _cast(variables):
    if isinstance(variables, AdArray):
        return variables
    return AdArray(variables, 0.0)

"""Small helper functions shared by the sub-packages."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, TypeVar, cast

import numpy as np

from .errors import MultiFluidModellingError

__all__ = [
    "safe_sum",
    "readonly_array",
    "all_same_length",
    "is_integral",
]


_Addable = TypeVar("_Addable")
"""A type variable representing any type supporting the + overload.

Note:
    Used in :func:`safe_sum` to state that the return value type is the same as the
    argument type.

"""


def safe_sum(x: Sequence[_Addable]) -> _Addable:
    """Safely sum the elements, without creating a first addition with 0.

    Important for AD arrays to avoid overhead.

    Parameters:
        x: A sequence of any objects which support the ``+`` operation.

    Returns:
        The sum of ``x``, or 0 for an empty sequence.

    """
    if len(x) >= 1:
        sum_ = x[0]
        for i in range(1, len(x)):
            sum_ = sum_ + x[i]  # type: ignore[operator]
        return sum_
    else:
        return cast(_Addable, 0.0)


def readonly_array(values: Any, dtype: type = np.float64) -> np.ndarray:
    """Copy ``values`` into a new, 1D or 2D, non-writeable numpy array.

    Objects shared between concurrent evaluations store their coefficients in such
    arrays.

    """
    arr = np.array(values, dtype=dtype)
    arr.flags.writeable = False
    return arr


def all_same_length(record: Mapping[str, Any], fields: Sequence[str]) -> bool:
    """Check that all ``fields`` of a parameter record are sequences of equal length.

    Raises:
        MultiFluidModellingError: If one of the fields is missing in ``record``.

    """
    missing = [f for f in fields if f not in record]
    if missing:
        raise MultiFluidModellingError(
            f"Fields {missing} are missing in record of type {record.get('type')!r}."
        )
    lengths = set(len(record[f]) for f in fields)
    return len(lengths) <= 1


def is_integral(values: np.ndarray) -> bool:
    """True if all entries of ``values`` are integral numbers."""
    return bool(np.all(np.asarray(values, dtype=np.float64) % 1.0 == 0.0))

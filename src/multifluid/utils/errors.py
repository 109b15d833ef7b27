"""Exception classes raised when constructing multi-fluid models.

All errors are raised at construction time. The evaluation of a constructed model does
not raise any of them.

"""

from __future__ import annotations

from typing import Sequence

__all__ = [
    "MultiFluidModellingError",
    "BinaryPairNotFoundError",
    "DepartureFunctionNotFoundError",
]


class MultiFluidModellingError(ValueError):
    """Custom exception class to alert the user when a parameter record or a parameter
    set is structurally invalid.

    Such usage includes for example:

    - coefficient arrays of unequal length within one term,
    - non-integral values in an exponent which is evaluated as an integer power,
    - unknown term or departure function types,
    - pair matrices violating the (anti-)symmetry of binary interaction parameters,
    - invariant reducing functions for mixtures with other than two components,
    - override documents which do not match the number of components of a model.

    """


class BinaryPairNotFoundError(MultiFluidModellingError, LookupError):
    """Raised if no binary interaction parameters are available for a pair of
    components and estimation is not requested.

    Parameters:
        pair: Names of the two components, in the order they were requested.

    """

    def __init__(self, pair: Sequence[str]) -> None:
        self.pair: tuple[str, ...] = tuple(pair)
        super().__init__(
            f"Can't match the binary pair {self.pair[0]!r} - {self.pair[1]!r}."
        )


class DepartureFunctionNotFoundError(MultiFluidModellingError, LookupError):
    """Raised if a binary interaction record references a departure function which is
    not contained in the departure function collection.

    Parameters:
        name: The referenced name.

    """

    def __init__(self, name: str) -> None:
        self.name: str = name
        super().__init__(f"Departure function {name!r} not found in the collection.")

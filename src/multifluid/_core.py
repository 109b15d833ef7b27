"""This private module contains central constants and compilation flags for the
entire package.

The flags are read from the optional configuration file ``multifluid.cfg`` (see
:mod:`multifluid`), and fall back to the defaults documented below.

Changes here should be done with much care.

"""

from __future__ import annotations

import multifluid as mf

__all__ = [
    "R_IDEAL_MOL",
]


def _read_flag(section: str, key: str, default: bool) -> bool:
    """Read a boolean flag from the configuration, or return the default."""
    try:
        return mf.config[section][key].strip().lower() == "true"
    except KeyError:
        return default


NUMBA_CACHE: bool = _read_flag("numba", "cache", True)
"""Flag to instruct the numba compiler to cache (!and use cached!) functions.

Config: ``[numba] cache``.

See Also:
    https://numba.readthedocs.io/en/stable/user/jit.html#cache

"""

NUMBA_FAST_MATH: bool = _read_flag("numba", "fastmath", False)
"""Flag to instruct the numba compiler to use it's ``fastmath`` functions.

To be used with care, due to loss in precision. Config: ``[numba] fastmath``.

See Also:
    https://numba.readthedocs.io/en/stable/reference/jit-compilation.html#numba.jit

"""

USE_COMPILED_KERNELS: bool = _read_flag("numerics", "compiled", True)
"""Flag to evaluate Helmholtz energy terms with the compiled kernels in
:mod:`~multifluid.eos.terms_c`, whenever reduced temperature and density are plain
reals.

If False, plain reals go through the same Python code as AD arrays.
Config: ``[numerics] compiled``.

"""

R_IDEAL_MOL: float = 8.31446261815324
"""Universal gas constant in ``[J / K mol]``."""

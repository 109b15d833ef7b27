"""Residual Helmholtz energy terms of pure fluids and departure functions.

Term evaluators are in :mod:`~multifluid.eos.terms` (with compiled kernels in
:mod:`~multifluid.eos.terms_c`), their construction from parameter records in
:mod:`~multifluid.eos.builders`.

"""

__all__ = []

from . import builders, terms
from .builders import *
from .terms import *

__all__.extend(terms.__all__)
__all__.extend(builders.__all__)

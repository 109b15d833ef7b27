"""Forward-mode automatic differentiation.

The :class:`AdArray` is the differentiation-capable scalar type which can be passed to
every evaluation routine of the package. :mod:`~multifluid.ad.functions` contains the
elementary functions dispatching on it.

"""

__all__ = []

from . import forward_mode, functions
from .forward_mode import *
from .functions import *

__all__.extend(forward_mode.__all__)
__all__.extend(functions.__all__)

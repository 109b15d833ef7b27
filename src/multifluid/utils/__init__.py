"""Utility functions and exception classes of the package.

The timing decorator in :mod:`~multifluid.utils.logging` is exposed on package level
as ``multifluid.time_logger``. Testing helpers for derivatives are located in
:mod:`~multifluid.utils.derivative_testing` and are not imported here.

"""

__all__ = []

from . import common, errors
from .common import *
from .errors import *

__all__.extend(common.__all__)
__all__.extend(errors.__all__)

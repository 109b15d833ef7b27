"""Multi-fluid mixture models and adapters."""

__all__ = []

from . import adapter, multifluid
from .adapter import *
from .multifluid import *

__all__.extend(multifluid.__all__)
__all__.extend(adapter.__all__)

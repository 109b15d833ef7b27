"""Mixing rules of multi-fluid models: binary interaction parameters, reducing
functions and the corresponding-states and departure contributions."""

__all__ = []

from . import bip, contributions, reducing
from .bip import *
from .contributions import *
from .reducing import *

__all__.extend(bip.__all__)
__all__.extend(reducing.__all__)
__all__.extend(contributions.__all__)

"""   multifluid.

Root directory for the multifluid package, evaluating the residual Helmholtz energy of
multi-parameter mixture models (GERG-2004 and GERG-2008 type). Contains the following
sub-packages:

ad: Forward-mode automatic differentiation and the elementary functions acting on it.

eos: Residual Helmholtz energy terms of pure fluids and departure functions, and their
    construction from parameter records.

mixing: Binary interaction parameters, reducing functions and the
    corresponding-states and departure contributions.

models: Mixture models and model adapters.

utils: Utility functions, exceptions, timing and derivative testing.


isort:skip_file

"""

import os
from pathlib import Path
import configparser


__version__ = "0.3.0"

# Try to read the config file from the directory where python process was launched
try:
    cwd = Path(os.getcwd())
    pth = cwd / Path("multifluid.cfg")
    cfg = configparser.ConfigParser()
    cfg.read(pth)
    config = dict(cfg)
except (OSError, configparser.Error):
    # the assumption is that no configurations are given
    config = {}

# ------------------------------------
# Simplified namespaces. The rule of thumb is that classes and functions that a
# user can be exposed to should have a shortcut here.

from multifluid._core import R_IDEAL_MOL
from multifluid.utils.errors import (
    MultiFluidModellingError,
    BinaryPairNotFoundError,
    DepartureFunctionNotFoundError,
)
from multifluid.utils.logging import time_logger

from multifluid import ad
from multifluid.ad import AdArray, initAdArrays

from multifluid import eos
from multifluid.eos import (
    PowerTerm,
    ExponentialTerm,
    GaussianTerm,
    GERG2004Term,
    GaoBTerm,
    Lemmon2005Term,
    NonAnalyticTerm,
    NullTerm,
    EOSTerm,
    TermCollection,
    build_eos_terms,
    get_eos_terms,
    build_departure_function,
)

from multifluid import mixing
from multifluid.mixing import (
    MultiFluidReducingFunction,
    MultiFluidInvariantReducingFunction,
    CorrespondingStatesContribution,
    DepartureContribution,
    get_bip_matrices,
    get_F_matrix,
    get_departure_function_matrix,
    get_critical_constants,
)

from multifluid import models
from multifluid.models import (
    MultiFluid,
    MultiFluidAdapter,
    build_multifluid_model,
    build_multifluid_mutant,
    build_multifluid_mutant_invariant,
)

"""Timing functionality for the construction of multi-fluid models.

Timing is controlled by the configuration file multifluid.cfg, which should be placed
in the current working directory (where the python script is initiated). All
timing-related information is located in a section in the cfg-file with heading
logging; see sample file below.

By default, timing is switched off. It can be turned on by setting the keyword
'active' to True.

Only construction functions are timed. The evaluation of models is called millions of
times inside solvers and is never decorated. Functions are classified in the following
(overlapping) categories

    all: Used to time all construction functions.
    terms: Construction of Helmholtz energy terms from parameter records.
    mixing: Binary interaction parameters, reducing functions and departure matrices.
    models: Assembly of mixture models and model adapters.

Example logging section of multifluid.cfg:

    [logging]
    # Activate timing. Without this, the rest of the section has no effect
    active: True
    # To only time specific sections, use e.g.
    sections: terms
    # multiple sections are separated by commas:
    sections: mixing, models

Messages of the package itself go through the standard loggers named after the modules
(``logging.getLogger(__name__)``) and are configured as usual by the application.

"""

from __future__ import annotations

import functools
import logging
import time
from typing import Sequence

import multifluid as mf

__all__ = ["time_logger"]


# Try to access configuration information, as activated by the import of multifluid
try:
    config = mf.config["logging"]
    raw_sections = config.get("sections", "all")
    active_sections = [s.strip().lower() for s in raw_sections.split(",")]
    logger_is_active = config.get("active", "false").strip().lower() == "true"
    always_log = "all" in active_sections

except KeyError:
    active_sections = ["all"]
    logger_is_active = False
    always_log = True

t_logger = logging.getLogger("MultiFluidTimer")
t_logger.setLevel(logging.INFO)


if logger_is_active and not t_logger.hasHandlers():
    # Add handler to write to file.
    time_handler = logging.FileHandler("MultiFluidTimings.log")
    time_handler.setLevel(logging.INFO)
    time_formatter = logging.Formatter("%(message)s")
    time_handler.setFormatter(time_formatter)
    t_logger.addHandler(time_handler)


def time_logger(sections: Sequence[str]):
    """A decorator that measures ellapsed time for a construction function."""

    # The double nested function is needed to allow decorators with arguments.
    def inner_func(func):
        @functools.wraps(func)
        def log_time(*args, **kwargs):
            if not logger_is_active:
                return func(*args, **kwargs)
            elif always_log or any([s in active_sections for s in sections]):
                name = f"{func.__name__} in module {func.__module__}."

                t_logger.log(level=logging.INFO, msg=f"Calling {name}")

                start_time = time.perf_counter()
                value = func(*args, **kwargs)
                run_time = time.perf_counter() - start_time

                t_logger.log(
                    level=logging.INFO,
                    msg=f"Finished {name} Elapsed time: {run_time:.8f} s",
                )

                return value
            else:
                return func(*args, **kwargs)

        return log_time

    return inner_func

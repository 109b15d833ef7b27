"""Contains parameter records and fixtures shared by the testing modules of mixture
models.

The records mimic the structure of the CoolProp fluid and mixture libraries, with
shortened coefficient lists.

"""

from __future__ import annotations

import copy

import pytest

import multifluid as mf

_FLUIDS: dict[str, dict] = {
    "Methane": {
        "INFO": {"NAME": "Methane"},
        "EOS": [
            {
                "STATES": {"reducing": {"T": 190.564, "rhomolar": 10139.128}},
                "alphar": [
                    {
                        "type": "ResidualHelmholtzPower",
                        "n": [0.57335704239162, -1.676068752373, 0.23405291834916],
                        "t": [0.125, 1.125, 0.375],
                        "d": [1, 1, 2],
                        "l": [0, 0, 1],
                    },
                    {
                        "type": "ResidualHelmholtzGaussian",
                        "n": [-0.0098038985517335],
                        "t": [2.0],
                        "d": [2],
                        "eta": [20.0],
                        "beta": [200.0],
                        "gamma": [1.07],
                        "epsilon": [1.0],
                    },
                ],
            }
        ],
    },
    "Ethane": {
        "INFO": {"NAME": "Ethane"},
        "EOS": [
            {
                "STATES": {"reducing": {"T": 305.322, "rhomolar": 6870.854}},
                "alphar": [
                    {
                        "type": "ResidualHelmholtzPower",
                        "n": [0.63596780450714, -1.7377981785459, 0.28914060926272],
                        "t": [0.125, 1.125, 0.375],
                        "d": [1, 1, 2],
                        "l": [0, 0, 2],
                    },
                    {
                        "type": "ResidualHelmholtzExponential",
                        "n": [-0.33714276845694],
                        "t": [0.625],
                        "d": [2],
                        "g": [1.0],
                        "l": [1],
                    },
                ],
            }
        ],
    },
    "Nitrogen": {
        "INFO": {"NAME": "Nitrogen"},
        "EOS": [
            {
                "STATES": {"reducing": {"T": 126.192, "rhomolar": 11183.9}},
                "alphar": [
                    {
                        "type": "ResidualHelmholtzPower",
                        "n": [0.59889711801201, -1.6941557480731, 0.24579736191718],
                        "t": [0.125, 1.125, 0.375],
                        "d": [1, 1, 2],
                        "l": [0, 0, 0],
                    },
                ],
            }
        ],
    },
}

_BIPS: list[dict] = [
    {
        "Name1": "Methane",
        "Name2": "Ethane",
        "betaT": 0.996336508,
        "gammaT": 1.049707697,
        "betaV": 0.997547866,
        "gammaV": 1.006617867,
        "F": 1.0,
        "function": "Methane-Ethane",
    },
    {
        "Name1": "Methane",
        "Name2": "Nitrogen",
        "betaT": 0.998721377,
        "gammaT": 1.013950311,
        "betaV": 0.998098830,
        "gammaV": 0.979273013,
        "F": 1.0,
        "function": "Methane-Nitrogen",
    },
    {
        "Name1": "Ethane",
        "Name2": "Nitrogen",
        "betaT": 0.979105972,
        "gammaT": 1.171874530,
        "betaV": 0.978653500,
        "gammaV": 1.110000000,
    },
]

_DEPARTURES: list[dict] = [
    {
        "Name": "Methane-Ethane",
        "type": "GERG-2008",
        "Npower": 2,
        "n": [
            -0.00080926050298746,
            -0.00075381925080059,
            -0.041618768891219,
            -0.23452173681569,
        ],
        "t": [0.65, 1.55, 3.1, 5.9],
        "d": [1, 4, 1, 2],
        "eta": [0.0, 0.0, 1.0, 1.0],
        "beta": [0.0, 0.0, 1.0, 1.0],
        "gamma": [0.0, 0.0, 0.5, 0.5],
        "epsilon": [0.0, 0.0, 0.5, 0.5],
    },
    {
        "Name": "Methane-Nitrogen",
        "type": "Exponential",
        "n": [-0.0098038985517335, 0.00042487270143005, -0.034800214576142],
        "t": [0.0, 1.85, 7.85],
        "d": [1, 4, 1],
        "l": [0, 0, 1],
    },
]


def fluid_records(components: list[str]) -> list[dict]:
    """Deep copies of the fluid records of ``components``."""
    return [copy.deepcopy(_FLUIDS[c]) for c in components]


def bip_collection() -> list[dict]:
    return copy.deepcopy(_BIPS)


def departure_collection() -> list[dict]:
    return copy.deepcopy(_DEPARTURES)


def override_entry(betaT: float = 1.0, Fij: float = 1.0) -> dict:
    """An entry of an override document with an exponential departure function."""
    return {
        "BIP": {
            "betaT": betaT,
            "gammaT": 1.02,
            "betaV": 0.99,
            "gammaV": 1.01,
            "Fij": Fij,
        },
        "departure": {
            "Name": "custom",
            "type": "Exponential",
            "n": [0.01, -0.02],
            "t": [1.0, 2.0],
            "d": [1, 2],
            "l": [0, 1],
        },
    }


@pytest.fixture(scope="module")
def components(request) -> list[str]:
    """Indirect parametrization of the components of a mixture."""
    return request.param


@pytest.fixture(scope="module")
def model(components: list[str]) -> mf.MultiFluid:
    """A multi-fluid model for ``components``."""
    return mf.build_multifluid_model(
        components,
        fluid_records(components),
        bip_collection(),
        departure_collection(),
    )

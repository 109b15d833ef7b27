"""Tests for the resolution of binary interaction parameters and departure functions
from parameter collections."""

from __future__ import annotations

import numpy as np
import pytest

from multifluid.eos.terms import NullTerm, PowerTerm
from multifluid.mixing.bip import (
    get_binary_interaction_double,
    get_bip_matrices,
    get_bip_record,
    get_critical_constants,
    get_departure_function_matrix,
    get_departure_function_name,
    get_F_matrix,
)
from multifluid.utils.errors import (
    BinaryPairNotFoundError,
    DepartureFunctionNotFoundError,
    MultiFluidModellingError,
)


@pytest.fixture
def bip_collection() -> list[dict]:
    return [
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
        },
        {
            "Name1": "Ethane",
            "Name2": "Nitrogen",
            "betaT": 0.979105972,
            "gammaT": 1.171874530,
            "betaV": 0.978653500,
            "gammaV": 1.110000000,
            "F": 0.5,
            "function": "",
        },
    ]


@pytest.fixture
def departure_collection() -> list[dict]:
    return [
        {
            "Name": "Methane-Ethane",
            "type": "Exponential",
            "n": [-0.0098038985517335, 0.00042487270143005],
            "t": [0.0, 1.85],
            "d": [1, 4],
            "l": [0, 0],
        },
    ]


def test_order_independence(bip_collection: list[dict]) -> None:
    """Reversed pairs give reciprocal betas and equal gammas."""
    fwd = get_binary_interaction_double(bip_collection, ("Methane", "Ethane"))
    bwd = get_binary_interaction_double(bip_collection, ("Ethane", "Methane"))

    assert fwd == (0.996336508, 1.049707697, 0.997547866, 1.006617867)
    assert bwd[0] == pytest.approx(1.0 / fwd[0], rel=1e-15)
    assert bwd[1] == fwd[1]
    assert bwd[2] == pytest.approx(1.0 / fwd[2], rel=1e-15)
    assert bwd[3] == fwd[3]


@pytest.mark.parametrize(
    "pair", [("METHANE", "ethane"), ("ethane", "methane"), ("EtHaNe", "MeThAnE")]
)
def test_case_insensitive_matching(bip_collection: list[dict], pair) -> None:
    record = get_bip_record(bip_collection, pair)
    assert record is bip_collection[0]

    betaT = get_binary_interaction_double(bip_collection, pair)[0]
    if pair[0].upper() == "ETHANE":
        assert betaT == pytest.approx(1.0 / 0.996336508, rel=1e-15)
    else:
        assert betaT == 0.996336508


def test_missing_pair(bip_collection: list[dict]) -> None:
    with pytest.raises(BinaryPairNotFoundError) as err:
        get_bip_record(bip_collection, ("Methane", "Water"))
    assert err.value.pair == ("Methane", "Water")
    assert "Methane" in str(err.value) and "Water" in str(err.value)
    assert isinstance(err.value, LookupError)
    assert isinstance(err.value, MultiFluidModellingError)


def test_estimate_only_for_missing_pairs(bip_collection: list[dict]) -> None:
    flags = {"estimate": True}
    assert get_bip_record(bip_collection, ("Methane", "Ethane"), flags) is (
        bip_collection[0]
    )
    assert get_binary_interaction_double(
        bip_collection, ("Water", "Methane"), flags
    ) == (1.0, 1.0, 1.0, 1.0)
    assert get_bip_record(bip_collection, ("Water", "Methane"), flags)["F"] == 0.0

    with pytest.raises(BinaryPairNotFoundError):
        get_bip_record(bip_collection, ("Water", "Methane"), {"estimate": False})


def test_bip_matrices(bip_collection: list[dict]) -> None:
    components = ["Methane", "Nitrogen", "Ethane"]
    betaT, gammaT, betaV, gammaV = get_bip_matrices(bip_collection, components)

    for mat in (betaT, gammaT, betaV, gammaV):
        assert mat.shape == (3, 3)
        assert np.all(np.diag(mat) == 1.0)
    assert np.allclose(betaT * betaT.T, 1.0, rtol=1e-15)
    assert np.allclose(betaV * betaV.T, 1.0, rtol=1e-15)
    assert np.all(gammaT == gammaT.T) and np.all(gammaV == gammaV.T)

    # Nitrogen - Ethane is stored in reversed order.
    assert betaT[1, 2] == pytest.approx(1.0 / 0.979105972, rel=1e-15)
    assert betaT[2, 1] == pytest.approx(0.979105972, rel=1e-15)
    assert gammaV[1, 2] == 1.11


def test_F_matrix(bip_collection: list[dict]) -> None:
    F = get_F_matrix(bip_collection, ["Methane", "Ethane", "Nitrogen"])
    assert np.all(F == F.T) and np.all(np.diag(F) == 0.0)
    assert F[0, 1] == 1.0
    assert F[0, 2] == 0.0  # No F in record
    assert F[1, 2] == 0.5


def test_departure_function_names(bip_collection: list[dict]) -> None:
    assert (
        get_departure_function_name(bip_collection, ("Ethane", "Methane"))
        == "Methane-Ethane"
    )
    # Missing and empty names both mean no departure function.
    assert get_departure_function_name(bip_collection, ("Methane", "Nitrogen")) == ""
    assert get_departure_function_name(bip_collection, ("Ethane", "Nitrogen")) == ""


def test_departure_function_matrix(
    bip_collection: list[dict], departure_collection: list[dict]
) -> None:
    components = ["Methane", "Ethane", "Nitrogen"]
    funcs = get_departure_function_matrix(
        departure_collection, bip_collection, components
    )
    N = len(components)
    assert len(funcs) == N * N
    assert all(f.is_locked for f in funcs)

    for i in range(N):
        assert isinstance(funcs[i * N + i][0], NullTerm)
        for j in range(N):
            assert funcs[i * N + j] is funcs[j * N + i]

    assert isinstance(funcs[0 * N + 1][0], PowerTerm)
    assert isinstance(funcs[0 * N + 2][0], NullTerm)
    assert isinstance(funcs[1 * N + 2][0], NullTerm)


def test_unknown_departure_function(bip_collection: list[dict]) -> None:
    with pytest.raises(DepartureFunctionNotFoundError) as err:
        get_departure_function_matrix([], bip_collection, ["Methane", "Ethane"])
    assert err.value.name == "Methane-Ethane"


def test_critical_constants() -> None:
    records = [
        {"EOS": [{"STATES": {"reducing": {"T": 190.564, "rhomolar": 10139.128}}}]},
        {"EOS": [{"STATES": {"reducing": {"T": 305.322, "rhomolar": 6870.854}}}]},
    ]
    Tc, vc = get_critical_constants(records)
    assert np.all(Tc == [190.564, 305.322])
    assert np.allclose(vc, [1.0 / 10139.128, 1.0 / 6870.854], rtol=1e-15)

    with pytest.raises(MultiFluidModellingError):
        get_critical_constants([{"EOS": [{"STATES": {}}]}])


@pytest.mark.parametrize(
    "record, name",
    [
        ({"INFO": {"NAME": "Argon"}, "EOS": []}, "'Argon'"),
        ({"INFO": "Argon", "EOS": [{}]}, "'<unknown>'"),
        (["EOS"], "'<unknown>'"),
        ("Argon", "'<unknown>'"),
        (None, "'<unknown>'"),
    ],
)
def test_critical_constants_invalid_records(record, name: str) -> None:
    """Malformed records give a modelling error naming the fluid, if possible."""
    with pytest.raises(MultiFluidModellingError, match=name):
        get_critical_constants([record])

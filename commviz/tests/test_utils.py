import numpy as np
import pytest

from commviz.utils import (
    Advisory,
    InvalidInput,
    SimParams,
    bits_from_string,
    bits_to_string,
    gen_random_bits,
    require_positive,
    time_axis_for,
    validate_bits,
)


@pytest.mark.parametrize("s,expected", [
    ("0", [0]),
    ("1", [1]),
    ("1011", [1, 0, 1, 1]),
    ("  0110\n", [0, 1, 1, 0]),
])
def test_bits_from_string(s, expected):
    assert bits_from_string(s) == expected


@pytest.mark.parametrize("s", ["", "   ", "10a1", "1 0", "2", "0b101", "１０"])
def test_bits_from_string_rejects(s):
    with pytest.raises(InvalidInput):
        bits_from_string(s)


def test_invalid_input_is_value_error():
    with pytest.raises(ValueError):
        bits_from_string("xyz")


def test_bits_to_string_roundtrip():
    assert bits_to_string(bits_from_string("10110010")) == "10110010"


def test_gen_random_bits_seeded():
    a = gen_random_bits(32, seed=5)
    assert a == gen_random_bits(32, seed=5)
    assert len(a) == 32
    assert set(a) <= {0, 1}


def test_validate_bits():
    validate_bits([0, 1, 1])
    with pytest.raises(InvalidInput):
        validate_bits([])
    with pytest.raises(InvalidInput):
        validate_bits([0, 3])


@pytest.mark.parametrize("value", [0, -2.0, float("nan"), float("-inf"), "1", None, False])
def test_require_positive_rejects(value):
    with pytest.raises(InvalidInput):
        require_positive("x", value)


def test_require_positive_allow_zero():
    assert require_positive("fd", 0, allow_zero=True) == 0.0
    assert require_positive("fd", np.float64(2.5)) == 2.5
    with pytest.raises(InvalidInput):
        require_positive("fd", -0.1, allow_zero=True)


def test_time_axis_for():
    t = time_axis_for(1.0, 10.0)
    assert len(t) == 10
    assert t[-1] == pytest.approx(0.9)
    assert len(time_axis_for(3 * 0.2, 50.0)) == 30
    assert len(time_axis_for(0.75, 10.0)) == 8


def test_samples_per_bit():
    assert SimParams(fs=100.0, Tb=0.5, Ac=1.0, fc=10.0).samples_per_bit == 50
    assert SimParams(fs=1.0, Tb=0.1, Ac=1.0, fc=10.0).samples_per_bit == 1


def test_advisory_str():
    a = Advisory("aliasing", "too slow")
    assert str(a) == "too slow"
    assert a == Advisory("aliasing", "too slow")

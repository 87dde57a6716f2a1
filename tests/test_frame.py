import numpy as np
import pytest

from ofdm_sim.errors import ParameterOutOfRangeError
from ofdm_sim.ofdm.frame import (
    DATA,
    NULL,
    PILOT,
    add_cyclic_prefix,
    extract_data,
    extract_pilots,
    insert_pilots,
    num_data_subcarriers,
    pilot_indices,
    remove_cyclic_prefix,
    subcarrier_map,
)


def test_pilot_layout_64_by_8():
    np.testing.assert_array_equal(pilot_indices(64, 8), np.arange(0, 64, 8))
    assert num_data_subcarriers(64, 8) == 56


def test_insert_and_extract():
    data = np.arange(1, 57) * (1 + 1j)
    frame = insert_pilots(data, 64, 8, 2.0)
    assert frame.size == 64
    pilots, idx = extract_pilots(frame, 8)
    np.testing.assert_array_equal(idx, np.arange(0, 64, 8))
    np.testing.assert_array_equal(pilots, np.full(8, 2.0 + 0j))
    np.testing.assert_array_equal(extract_data(frame, 8), data)
    assert frame[1] == data[0]
    assert frame[9] == data[7]


def test_insert_pilots_short_and_long_data():
    short = insert_pilots(np.ones(3), 16, 4, 1.0)
    np.testing.assert_array_equal(extract_data(short, 4), [1, 1, 1] + [0] * 9)
    long = insert_pilots(np.arange(20) + 0j, 16, 4, 1.0)
    np.testing.assert_array_equal(extract_data(long, 4), np.arange(12))


def test_subcarrier_map_roles():
    roles = subcarrier_map(8, 4, 4)
    np.testing.assert_array_equal(roles, [PILOT, DATA, DATA, DATA, PILOT, DATA, NULL, NULL])


def test_invalid_spacing():
    with pytest.raises(ParameterOutOfRangeError):
        insert_pilots(np.ones(4), 8, 0, 1.0)
    with pytest.raises(ParameterOutOfRangeError):
        extract_pilots(np.ones(8), -2)


@pytest.mark.parametrize("cp", [1, 5, 15])
def test_cyclic_prefix_round_trip(cp):
    rng = np.random.default_rng(cp)
    x = rng.normal(size=16) + 1j * rng.normal(size=16)
    with_cp = add_cyclic_prefix(x, cp)
    assert with_cp.size == 16 + cp
    np.testing.assert_array_equal(with_cp[:cp], x[-cp:])
    np.testing.assert_array_equal(remove_cyclic_prefix(with_cp, cp), x)


@pytest.mark.parametrize("cp", [0, -1, 16, 20])
def test_cyclic_prefix_noop_outside_range(cp):
    x = np.arange(16) + 0j
    np.testing.assert_array_equal(add_cyclic_prefix(x, cp), x)

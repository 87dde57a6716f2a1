import numpy as np
import pytest

from ofdm_sim.channel.multipath import MultipathChannel, frequency_response
from ofdm_sim.errors import InvalidLengthError, ParameterOutOfRangeError
from ofdm_sim.estimation.equalizer import equalize, mmse, zero_forcing
from ofdm_sim.estimation.estimator import (
    estimate_channel,
    interpolate_dft,
    interpolate_linear,
    interpolate_polar,
    pilot_channel_estimates,
)


def _pilots(h: np.ndarray, spacing: int, power: float):
    idx = np.arange(0, h.size, spacing)
    return h[idx] * power, idx


def test_ls_pilot_estimate_divides_by_power():
    np.testing.assert_allclose(pilot_channel_estimates([2 + 4j, -1j], 2.0), [1 + 2j, -0.5j])


@pytest.mark.parametrize("interp", [interpolate_linear, interpolate_polar])
def test_exact_at_pilots(interp):
    rng = np.random.default_rng(1)
    h = rng.normal(size=64) + 1j * rng.normal(size=64)
    received, idx = _pilots(h, 8, 1.5)
    est = interp(received, idx, 1.5, 64)
    assert est.size == 64
    np.testing.assert_array_equal(est[idx], received / 1.5)


def test_linear_midpoint_and_flat_edges():
    received = np.array([1 + 1j, 3 - 1j])
    idx = np.array([2, 6])
    est = interpolate_linear(received, idx, 1.0, 8)
    assert est[4] == pytest.approx(2 + 0j)
    np.testing.assert_allclose(est[:3], 1 + 1j)
    np.testing.assert_allclose(est[6:], 3 - 1j)


def test_polar_interpolates_magnitude_and_unwraps_phase():
    # Phases just either side of the -pi/pi cut.
    a = 1.0 * np.exp(1j * (np.pi - 0.1))
    b = 3.0 * np.exp(1j * (-np.pi + 0.1))
    est = interpolate_polar(np.array([a, b]), np.array([0, 4]), 1.0, 8)
    mid = est[2]
    assert abs(mid) == pytest.approx(2.0)
    assert abs(np.angle(mid)) == pytest.approx(np.pi)
    np.testing.assert_allclose(est[4:], b)


def test_polar_single_pilot_is_flat():
    est = interpolate_polar(np.array([0.5j]), np.array([0]), 1.0, 4)
    np.testing.assert_allclose(est, 0.5j)


def test_dft_recovers_short_channel():
    channel = MultipathChannel(delays=(0.0, 1.0, 3.0), gains=(0.8, 0.5, 0.3), phases=(0.0, 1.0, -2.0))
    n = 64
    h = frequency_response(channel, n)
    received, idx = _pilots(h, 4, 1.0)
    linear = interpolate_linear(received, idx, 1.0, n)
    dft = interpolate_dft(received, idx, 1.0, n, threshold=16)
    assert dft.size == n
    # Clean pilots: low-delay truncation should not be worse than plain linear.
    assert np.mean(np.abs(dft - h) ** 2) <= np.mean(np.abs(linear - h) ** 2) + 1e-3


def test_dft_threshold_bounds():
    received, idx = _pilots(np.ones(32, dtype=np.complex128), 4, 1.0)
    with pytest.raises(ParameterOutOfRangeError):
        interpolate_dft(received, idx, 1.0, 32, threshold=0)
    with pytest.raises(ParameterOutOfRangeError):
        interpolate_dft(received, idx, 1.0, 32, threshold=17)
    np.testing.assert_allclose(interpolate_dft(received, idx, 1.0, 32), np.ones(32), atol=1e-12)


def test_dft_requires_power_of_two():
    received, idx = _pilots(np.ones(24, dtype=np.complex128), 4, 1.0)
    with pytest.raises(InvalidLengthError):
        interpolate_dft(received, idx, 1.0, 24, threshold=4)


def test_dispatch_falls_back_to_linear():
    rng = np.random.default_rng(4)
    received = rng.normal(size=4) + 1j * rng.normal(size=4)
    idx = np.array([0, 4, 8, 12])
    linear = interpolate_linear(received, idx, 1.0, 16)
    np.testing.assert_array_equal(estimate_channel(received, idx, 1.0, 16), linear)
    np.testing.assert_array_equal(estimate_channel(received, idx, 1.0, 16, method="spline"), linear)
    np.testing.assert_array_equal(
        estimate_channel(received, idx, 1.0, 16, method="polar"),
        interpolate_polar(received, idx, 1.0, 16),
    )


def test_estimator_input_validation():
    with pytest.raises(ParameterOutOfRangeError):
        interpolate_linear([1 + 0j], [0], 0.0, 8)
    with pytest.raises(InvalidLengthError):
        interpolate_linear([1 + 0j, 2 + 0j], [0], 1.0, 8)
    with pytest.raises(ParameterOutOfRangeError):
        interpolate_linear([1 + 0j, 2 + 0j], [4, 0], 1.0, 8)


def test_zero_forcing_guards_deep_fade():
    y = np.array([2 + 2j, 1 + 0j, 3j])
    h = np.array([1 + 1j, 0j, 1e-12 + 0j])
    out = zero_forcing(y, h)
    np.testing.assert_allclose(out, [2, 0, 0])
    assert np.all(np.isfinite(out))


def test_mmse_formula_and_high_snr_limit():
    y = np.array([1 + 1j, -2 + 0.5j])
    h = np.array([0.5 - 0.5j, 2j])
    snr_db = 10.0
    expected = y * np.conj(h) / (np.abs(h) ** 2 + 0.1)
    np.testing.assert_allclose(mmse(y, h, snr_db), expected)
    np.testing.assert_allclose(mmse(y, h, 200.0), y / h)


def test_equalize_dispatch():
    y = np.array([1 + 0j, 2 + 0j])
    h = np.array([1 + 0j, 2 + 0j])
    np.testing.assert_allclose(equalize(y, h, 20.0, method="zf"), [1, 1])
    with pytest.raises(ValueError):
        equalize(y, h, 20.0, method="ml")
    with pytest.raises(InvalidLengthError):
        mmse(y, h[:1], 20.0)


def test_estimator_comparison_script_small_run():
    import ofdm_channel_estimation as demo

    cfg = demo.EstimatorComparisonConfig(num_trials=5, snr_db=30.0)
    results = demo.simulate(cfg)
    assert set(results) == {"linear", "polar", "dft"}
    for mse, ber in results.values():
        assert mse >= 0.0
        assert 0.0 <= ber <= 1.0


def test_estimator_comparison_accepts_unseeded_config():
    import ofdm_channel_estimation as demo

    cfg = demo.EstimatorComparisonConfig(num_trials=2, seed=None)
    assert cfg.seed is None
    assert set(demo.simulate(cfg)) == {"linear", "polar", "dft"}

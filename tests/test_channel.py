import math

import numpy as np
import pytest

from ofdm_sim.channel.awgn import add_awgn, box_muller
from ofdm_sim.channel.multipath import (
    MultipathChannel,
    apply_channel,
    frequency_response,
    generate_random_multipath_channel,
)
from ofdm_sim.config import MultipathConfig
from ofdm_sim.dsp.fft import fft
from ofdm_sim.errors import InvalidLengthError, ParameterOutOfRangeError


def test_apply_channel_shifts_and_scales():
    channel = MultipathChannel(delays=(0.0, 2.0), gains=(1.0, 0.5), phases=(0.0, math.pi / 2))
    signal = np.array([1, 0, 0, 0, 0], dtype=np.complex128)
    out = apply_channel(signal, channel)
    np.testing.assert_allclose(out, [1, 0, 0.5j, 0, 0], atol=1e-12)


def test_apply_channel_drops_overflow_and_rounds_half_up():
    channel = MultipathChannel(delays=(2.5,), gains=(1.0,), phases=(0.0,))
    signal = np.arange(1, 6) + 0j
    out = apply_channel(signal, channel)
    assert out.size == signal.size
    np.testing.assert_allclose(out, [0, 0, 0, 1, 2])

    far = MultipathChannel(delays=(10.0,), gains=(1.0,), phases=(0.0,))
    np.testing.assert_array_equal(apply_channel(signal, far), np.zeros(5))


def test_frequency_response_matches_circular_convolution():
    channel = MultipathChannel(delays=(0.0, 2.0, 4.0), gains=(1.0, 0.5, 0.3), phases=(0.0, math.pi / 4, math.pi / 2))
    n = 32
    impulse = np.zeros(n, dtype=np.complex128)
    for d, g, p in zip(channel.delays, channel.gains, channel.phases):
        impulse[int(d)] += g * np.exp(1j * p)
    np.testing.assert_allclose(frequency_response(channel, n), fft(impulse), atol=1e-12)


def test_channel_length_mismatch_rejected():
    with pytest.raises(InvalidLengthError):
        MultipathChannel(delays=(0.0, 1.0), gains=(1.0,), phases=(0.0,))
    with pytest.raises(ParameterOutOfRangeError):
        MultipathChannel(delays=(-1.0,), gains=(1.0,), phases=(0.0,))


@pytest.mark.parametrize("num_paths", [1, 2, 3, 6, 10])
def test_random_channel_normalised(num_paths):
    rng = np.random.default_rng(num_paths)
    channel = generate_random_multipath_channel(12.0, num_paths, rng)
    assert len(channel.delays) == len(channel.gains) == len(channel.phases) == num_paths
    assert channel.delays[0] == 0.0
    assert channel.phases[0] == 0.0
    assert sum(g * g for g in channel.gains) == pytest.approx(1.0, abs=1e-9)
    assert all(0.0 <= d <= 12.0 for d in channel.delays)
    assert all(0.0 <= p < 2 * math.pi for p in channel.phases)


def test_random_channel_is_reproducible():
    a = generate_random_multipath_channel(5.0, 4, np.random.default_rng(3))
    b = generate_random_multipath_channel(5.0, 4, np.random.default_rng(3))
    assert a == b


def test_random_channel_bad_arguments():
    rng = np.random.default_rng(0)
    with pytest.raises(ParameterOutOfRangeError):
        generate_random_multipath_channel(0.0, 3, rng)
    with pytest.raises(ParameterOutOfRangeError):
        generate_random_multipath_channel(5.0, 0, rng)


def test_manual_paths_are_not_normalised():
    channel = MultipathConfig().to_channel()
    assert channel.total_power() == pytest.approx(1.0 + 0.25 + 0.09)
    assert channel.normalized().total_power() == pytest.approx(1.0)


def test_box_muller_statistics():
    rng = np.random.default_rng(11)
    a, b = box_muller(rng, 200_000)
    for x in (a, b):
        assert abs(np.mean(x)) < 0.01
        assert np.var(x) == pytest.approx(1.0, abs=0.02)
    assert abs(np.corrcoef(a, b)[0, 1]) < 0.01


def test_awgn_power_matches_snr():
    rng = np.random.default_rng(5)
    signal = np.exp(1j * rng.uniform(0, 2 * np.pi, size=100_000)) * 2.0
    noisy = add_awgn(signal, 10.0, rng)
    noise_power = np.mean(np.abs(noisy - signal) ** 2)
    assert noise_power == pytest.approx(4.0 / 10.0, rel=0.03)


def test_awgn_is_seedable():
    signal = np.ones(16, dtype=np.complex128)
    a = add_awgn(signal, 3.0, np.random.default_rng(9))
    b = add_awgn(signal, 3.0, np.random.default_rng(9))
    np.testing.assert_array_equal(a, b)
    assert add_awgn(np.zeros(0), 3.0, np.random.default_rng(9)).size == 0

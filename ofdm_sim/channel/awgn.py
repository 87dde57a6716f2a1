"""Complex additive white Gaussian noise."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from ..dsp.complex_ops import as_complex


def box_muller(rng: np.random.Generator, size: int) -> Tuple[np.ndarray, np.ndarray]:
    """Two independent standard-normal arrays from one pair of uniform draws."""

    # 1 - U[0, 1) lies in (0, 1], keeping the log finite.
    u = 1.0 - rng.random(size)
    v = rng.random(size)
    radius = np.sqrt(-2.0 * np.log(u))
    return radius * np.cos(2.0 * np.pi * v), radius * np.sin(2.0 * np.pi * v)


def add_awgn(signal, snr_db: float, rng: np.random.Generator) -> np.ndarray:
    """Add noise at ``snr_db`` relative to the measured mean signal power."""

    signal = as_complex(signal)
    if signal.size == 0:
        return signal.copy()
    signal_power = float(np.mean(np.abs(signal) ** 2))
    snr_linear = 10 ** (snr_db / 10.0)
    noise_power = signal_power / snr_linear
    noise_std = math.sqrt(noise_power / 2.0)
    noise_re, noise_im = box_muller(rng, signal.size)
    noise = noise_std * (noise_re + 1j * noise_im)
    return signal + noise.reshape(signal.shape)


__all__ = ["box_muller", "add_awgn"]

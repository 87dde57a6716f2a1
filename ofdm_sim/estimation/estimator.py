"""Least-squares pilot channel estimation with three interpolators.

Every estimator starts from the single-tap LS estimate at the pilots,
``H_p = Y_p / pilot_power``, and spreads it over all subcarriers:

* ``linear``: real and imaginary parts interpolated independently.
* ``polar``: magnitude and wrapped phase interpolated independently.
* ``dft``: ``linear`` result cleaned in the delay domain by zeroing every
  tap at or beyond ``threshold``.

Subcarriers before the first or after the last pilot take the value of the
nearest edge pilot.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from ..dsp.complex_ops import as_complex, from_polar, magnitude, phase
from ..dsp.fft import fft, ifft
from ..errors import InvalidLengthError, ParameterOutOfRangeError

logger = logging.getLogger(__name__)


def _prepare(
    received_pilots,
    pilot_indices,
    pilot_power: float,
    num_subcarriers: int,
) -> Tuple[np.ndarray, np.ndarray]:
    pilots = as_complex(received_pilots)
    indices = np.asarray(pilot_indices, dtype=np.int64)
    if pilots.ndim != 1 or indices.ndim != 1 or pilots.size != indices.size:
        raise InvalidLengthError("received_pilots and pilot_indices must be 1D and of equal length")
    if pilots.size == 0:
        raise InvalidLengthError("at least one pilot is required")
    if num_subcarriers <= 0:
        raise ParameterOutOfRangeError("num_subcarriers must be positive")
    if not pilot_power > 0:
        raise ParameterOutOfRangeError("pilot_power must be positive")
    if np.any(np.diff(indices) <= 0):
        raise ParameterOutOfRangeError("pilot_indices must be strictly increasing")
    if indices[0] < 0 or indices[-1] >= num_subcarriers:
        raise ParameterOutOfRangeError("pilot_indices fall outside the subcarrier range")
    return pilot_channel_estimates(pilots, pilot_power), indices


def pilot_channel_estimates(received_pilots, pilot_power: float) -> np.ndarray:
    """LS channel coefficient at each pilot: received value over the known amplitude."""

    return as_complex(received_pilots) / float(pilot_power)


def _brackets(indices: np.ndarray, num_subcarriers: int) -> Tuple[np.ndarray, np.ndarray]:
    """Left bracketing pilot (position in ``indices``) and weight per subcarrier.

    Needs at least two pilots.
    """

    grid = np.arange(num_subcarriers)
    left = np.searchsorted(indices, grid, side="right") - 1
    left = np.clip(left, 0, indices.size - 2)
    span = indices[left + 1] - indices[left]
    return left, (grid - indices[left]) / span


def interpolate_linear(received_pilots, pilot_indices, pilot_power: float, num_subcarriers: int) -> np.ndarray:
    h_pilots, indices = _prepare(received_pilots, pilot_indices, pilot_power, num_subcarriers)
    grid = np.arange(num_subcarriers)
    # np.interp clamps to the edge values outside [indices[0], indices[-1]].
    real = np.interp(grid, indices, h_pilots.real)
    imag = np.interp(grid, indices, h_pilots.imag)
    return real + 1j * imag


def _wrap_phase(delta: np.ndarray) -> np.ndarray:
    """Map phase differences into (-pi, pi]."""

    return np.pi - np.mod(np.pi - delta, 2.0 * np.pi)


def interpolate_polar(received_pilots, pilot_indices, pilot_power: float, num_subcarriers: int) -> np.ndarray:
    h_pilots, indices = _prepare(received_pilots, pilot_indices, pilot_power, num_subcarriers)
    mags = magnitude(h_pilots)
    phases = phase(h_pilots)
    if indices.size == 1:
        return np.full(num_subcarriers, h_pilots[0], dtype=np.complex128)

    left, weight = _brackets(indices, num_subcarriers)
    grid = np.arange(num_subcarriers)
    right = left + 1
    mag = mags[left] + weight * (mags[right] - mags[left])
    ang = phases[left] + weight * _wrap_phase(phases[right] - phases[left])

    out = from_polar(mag, ang)
    exact = np.isin(grid, indices)
    out[exact] = h_pilots[np.searchsorted(indices, grid[exact])]
    out[grid <= indices[0]] = h_pilots[0]
    out[grid >= indices[-1]] = h_pilots[-1]
    return out


def check_dft_threshold(threshold: int, num_subcarriers: int) -> None:
    if not 1 <= threshold <= num_subcarriers // 2:
        raise ParameterOutOfRangeError(
            f"dft threshold must lie in [1, {num_subcarriers // 2}], got {threshold}"
        )


def interpolate_dft(
    received_pilots,
    pilot_indices,
    pilot_power: float,
    num_subcarriers: int,
    threshold: Optional[int] = None,
) -> np.ndarray:
    if threshold is None:
        threshold = max(1, num_subcarriers // 4)
    check_dft_threshold(int(threshold), num_subcarriers)
    coarse = interpolate_linear(received_pilots, pilot_indices, pilot_power, num_subcarriers)
    taps = ifft(coarse)
    taps[int(threshold):] = 0.0
    return fft(taps)


def estimate_channel(
    received_pilots,
    pilot_indices,
    pilot_power: float,
    num_subcarriers: int,
    method: str = "linear",
    dft_threshold: Optional[int] = None,
) -> np.ndarray:
    """Dispatch to an interpolator by name; unknown names fall back to ``linear``."""

    if method == "polar":
        return interpolate_polar(received_pilots, pilot_indices, pilot_power, num_subcarriers)
    if method == "dft":
        return interpolate_dft(received_pilots, pilot_indices, pilot_power, num_subcarriers, dft_threshold)
    if method != "linear":
        logger.debug("Unknown interpolation %r, using linear", method)
    return interpolate_linear(received_pilots, pilot_indices, pilot_power, num_subcarriers)


__all__ = [
    "pilot_channel_estimates",
    "interpolate_linear",
    "interpolate_polar",
    "interpolate_dft",
    "check_dft_threshold",
    "estimate_channel",
]

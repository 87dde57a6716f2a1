"""Tapped-delay-line multipath channel."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..dsp.complex_ops import as_complex, from_polar
from ..errors import InvalidLengthError, ParameterOutOfRangeError


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class MultipathChannel:
    """Parallel per-path delays (samples), linear gains and phases (radians)."""

    delays: Tuple[float, ...]
    gains: Tuple[float, ...]
    phases: Tuple[float, ...]

    def __post_init__(self) -> None:
        if not len(self.delays) == len(self.gains) == len(self.phases):
            raise InvalidLengthError("delays, gains and phases must have equal length")
        if any(d < 0 for d in self.delays):
            raise ParameterOutOfRangeError("path delays must be non-negative")

    @property
    def num_paths(self) -> int:
        return len(self.delays)

    def coefficients(self) -> np.ndarray:
        return from_polar(np.asarray(self.gains, dtype=np.float64), np.asarray(self.phases, dtype=np.float64))

    def total_power(self) -> float:
        return float(np.sum(np.square(self.gains)))

    def normalized(self) -> "MultipathChannel":
        """Copy with gains rescaled so that the path powers sum to one."""

        power = self.total_power()
        if power <= 0:
            raise ParameterOutOfRangeError("cannot normalise a channel with zero power")
        scale = 1.0 / math.sqrt(power)
        return MultipathChannel(self.delays, tuple(g * scale for g in self.gains), self.phases)


def apply_channel(signal, channel: MultipathChannel) -> np.ndarray:
    """Linear convolution with the rounded tap delays, truncated to ``len(signal)``.

    Samples pushed past the end of the buffer are lost; the cyclic prefix has
    to be long enough to absorb the largest delay.
    """

    signal = as_complex(signal)
    if signal.ndim != 1:
        raise InvalidLengthError("signal must be a 1D sequence")
    n = signal.size
    output = np.zeros(n, dtype=np.complex128)
    for delay, coeff in zip(channel.delays, channel.coefficients()):
        shift = _round_half_up(delay)
        if shift >= n:
            continue
        output[shift:] += signal[: n - shift] * coeff
    return output


def frequency_response(channel: MultipathChannel, num_points: int) -> np.ndarray:
    """Analytic H[k] = sum_i g_i exp(j(phi_i - 2 pi k tau_i / N)).

    Uses the unrounded delays, so it only matches ``apply_channel`` exactly
    for integer delays.
    """

    if num_points <= 0:
        raise InvalidLengthError("num_points must be positive")
    k = np.arange(num_points)[:, None]
    delays = np.asarray(channel.delays, dtype=np.float64)[None, :]
    gains = np.asarray(channel.gains, dtype=np.float64)[None, :]
    phases = np.asarray(channel.phases, dtype=np.float64)[None, :]
    angle = phases - 2.0 * np.pi * k * delays / num_points
    return np.sum(from_polar(gains, angle), axis=1)


def generate_random_multipath_channel(
    delay_spread: float,
    num_paths: int,
    rng: np.random.Generator,
) -> MultipathChannel:
    """Random channel with an exponential power-delay profile and unit power.

    Path 0 is the line-of-sight path (delay 0, phase 0). Later paths draw
    delay ~ U[0, delay_spread], gain exp(-2 delay / delay_spread) * U[0.5, 1]
    and phase ~ U[0, 2 pi). All gains are then scaled so sum(g^2) == 1.
    """

    if num_paths < 1:
        raise ParameterOutOfRangeError("num_paths must be at least 1")
    if not delay_spread > 0:
        raise ParameterOutOfRangeError("delay_spread must be positive")

    delays = [0.0]
    gains = [1.0]
    phases = [0.0]
    for _ in range(1, num_paths):
        delay = float(rng.uniform(0.0, delay_spread))
        base_gain = math.exp(-delay / (delay_spread / 2.0))
        gains.append(base_gain * float(rng.uniform(0.5, 1.0)))
        delays.append(delay)
        phases.append(float(rng.uniform(0.0, 2.0 * math.pi)))

    channel = MultipathChannel(tuple(delays), tuple(gains), tuple(phases))
    return channel.normalized()


__all__ = [
    "MultipathChannel",
    "apply_channel",
    "frequency_response",
    "generate_random_multipath_channel",
]

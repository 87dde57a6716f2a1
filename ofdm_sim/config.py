"""Central configuration defaults for ofdm_sim."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .channel.multipath import MultipathChannel, generate_random_multipath_channel
from .dsp.fft import is_power_of_two
from .errors import InvalidLengthError, ParameterOutOfRangeError

MODULATIONS = ("QPSK", "16QAM", "64QAM")
CHANNEL_TYPES = ("awgn", "multipath")
INTERPOLATIONS = ("linear", "polar", "dft")
EQUALIZERS = ("mmse", "zf")


@dataclass
class OFDMConfig:
    num_subcarriers: int = 128
    cp_length: int = 16
    modulation: str = "QPSK"
    pilot_spacing: int = 8
    pilot_power: float = 1.0
    snr_db: float = 15.0
    channel_type: str = "multipath"
    interpolation: str = "linear"
    dft_threshold: Optional[int] = None  # None -> num_subcarriers // 4
    equalizer: str = "mmse"
    seed: int = 0

    def resolved_dft_threshold(self) -> int:
        if self.dft_threshold is None:
            return max(1, self.num_subcarriers // 4)
        return int(self.dft_threshold)

    def validate(self) -> None:
        """Fail fast on layout or tag values the core cannot honour."""

        if not is_power_of_two(self.num_subcarriers):
            raise InvalidLengthError(
                f"num_subcarriers must be a power of two, got {self.num_subcarriers}"
            )
        if not 0 <= self.cp_length < self.num_subcarriers:
            raise ParameterOutOfRangeError(
                f"cp_length must lie in [0, {self.num_subcarriers}), got {self.cp_length}"
            )
        if self.pilot_spacing <= 0:
            raise ParameterOutOfRangeError("pilot_spacing must be positive")
        if not self.pilot_power > 0:
            raise ParameterOutOfRangeError("pilot_power must be positive")
        if not math.isfinite(self.snr_db):
            raise ParameterOutOfRangeError("snr_db must be finite")
        if self.modulation not in MODULATIONS:
            raise ParameterOutOfRangeError(f"Unsupported modulation: {self.modulation}")
        if self.channel_type not in CHANNEL_TYPES:
            raise ParameterOutOfRangeError(f"Unsupported channel type: {self.channel_type}")
        if self.interpolation not in INTERPOLATIONS:
            raise ParameterOutOfRangeError(f"Unsupported interpolation: {self.interpolation}")
        if self.equalizer not in EQUALIZERS:
            raise ParameterOutOfRangeError(f"Unsupported equalizer: {self.equalizer}")
        if self.interpolation == "dft":
            threshold = self.resolved_dft_threshold()
            if not 1 <= threshold <= self.num_subcarriers // 2:
                raise ParameterOutOfRangeError(
                    f"dft_threshold must lie in [1, {self.num_subcarriers // 2}], got {threshold}"
                )


@dataclass
class PathConfig:
    delay: float = 0.0
    gain: float = 1.0
    phase: float = 0.0


def _default_paths() -> List[PathConfig]:
    return [
        PathConfig(0.0, 1.0, 0.0),
        PathConfig(2.0, 0.5, math.pi / 4),
        PathConfig(4.0, 0.3, math.pi / 2),
    ]


@dataclass
class MultipathConfig:
    """Either a manual path list or the recipe for a random channel.

    Manual paths are used exactly as entered; their gains are *not* rescaled
    to unit power. Only generated channels are power-normalised.
    """

    use_random: bool = False
    delay_spread: float = 10.0
    num_paths: int = 3
    paths: List[PathConfig] = field(default_factory=_default_paths)

    def to_channel(self, rng: Optional[np.random.Generator] = None) -> MultipathChannel:
        if self.use_random:
            if rng is None:
                raise ParameterOutOfRangeError("A random generator is required for random channels")
            return generate_random_multipath_channel(self.delay_spread, self.num_paths, rng)
        return MultipathChannel(
            delays=tuple(float(p.delay) for p in self.paths),
            gains=tuple(float(p.gain) for p in self.paths),
            phases=tuple(float(p.phase) for p in self.paths),
        )


DEFAULTS = OFDMConfig()


def get_config() -> OFDMConfig:
    """Return a copy of the default configuration."""

    return OFDMConfig(**DEFAULTS.__dict__)


__all__ = [
    "MODULATIONS",
    "CHANNEL_TYPES",
    "INTERPOLATIONS",
    "EQUALIZERS",
    "is_power_of_two",
    "OFDMConfig",
    "PathConfig",
    "MultipathConfig",
    "DEFAULTS",
    "get_config",
]

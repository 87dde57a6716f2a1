"""Pilot-based channel estimation and equalisation."""

from .equalizer import equalize, mmse, zero_forcing
from .estimator import (
    estimate_channel,
    interpolate_dft,
    interpolate_linear,
    interpolate_polar,
    pilot_channel_estimates,
)

__all__ = [
    "pilot_channel_estimates",
    "interpolate_linear",
    "interpolate_polar",
    "interpolate_dft",
    "estimate_channel",
    "zero_forcing",
    "mmse",
    "equalize",
]

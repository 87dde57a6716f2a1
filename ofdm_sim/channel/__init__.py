"""Multipath channel and noise models."""

from .awgn import add_awgn, box_muller
from .multipath import MultipathChannel, apply_channel, frequency_response, generate_random_multipath_channel

__all__ = [
    "MultipathChannel",
    "apply_channel",
    "frequency_response",
    "generate_random_multipath_channel",
    "add_awgn",
    "box_muller",
]

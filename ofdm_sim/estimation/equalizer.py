"""Per-subcarrier one-tap equalisers."""

from __future__ import annotations

import logging

import numpy as np

from ..dsp.complex_ops import as_complex, conjugate, divide, magnitude
from ..errors import InvalidLengthError

logger = logging.getLogger(__name__)

ZF_TOLERANCE = 1e-10


def _check_lengths(received: np.ndarray, estimate: np.ndarray) -> None:
    if received.ndim != 1 or received.shape != estimate.shape:
        raise InvalidLengthError("received symbols and channel estimate must be 1D and of equal length")


def zero_forcing(received, channel_estimate, tol: float = ZF_TOLERANCE) -> np.ndarray:
    """Y / H, with subcarriers where |H| < tol set to zero instead."""

    received = as_complex(received)
    h = as_complex(channel_estimate)
    _check_lengths(received, h)
    out = np.zeros_like(received)
    usable = magnitude(h) >= tol
    if not np.all(usable):
        logger.debug("Zero-forcing skipped %d faded subcarriers", int(np.count_nonzero(~usable)))
    out[usable] = divide(received[usable], h[usable])
    return out


def mmse(received, channel_estimate, snr_db: float) -> np.ndarray:
    """Wiener one-tap: Y conj(H) / (|H|^2 + 1/SNR)."""

    received = as_complex(received)
    h = as_complex(channel_estimate)
    _check_lengths(received, h)
    snr_linear = 10 ** (snr_db / 10.0)
    return received * conjugate(h) / (magnitude(h) ** 2 + 1.0 / snr_linear)


def equalize(received, channel_estimate, snr_db: float, method: str = "mmse") -> np.ndarray:
    if method == "mmse":
        return mmse(received, channel_estimate, snr_db)
    if method == "zf":
        return zero_forcing(received, channel_estimate)
    raise ValueError(f"Unsupported equalizer: {method}")


__all__ = ["ZF_TOLERANCE", "zero_forcing", "mmse", "equalize"]

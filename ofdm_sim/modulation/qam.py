"""Square QAM constellations with natural-binary labelling.

Symbol index ``i`` carries the bits of ``i`` written most-significant-bit
first. The labelling is deliberately *not* Gray coded, so a decision error
between neighbouring points can flip several bits.
"""

from __future__ import annotations

import functools
import logging
import math

import numpy as np

from ..errors import ParameterOutOfRangeError

logger = logging.getLogger(__name__)

MODULATION_ORDERS = {"QPSK": 4, "16QAM": 16, "64QAM": 64}


def modulation_order(modulation: str) -> int:
    try:
        return MODULATION_ORDERS[modulation]
    except KeyError:
        raise ParameterOutOfRangeError(f"Unsupported modulation: {modulation}") from None


def bits_per_symbol(modulation: str) -> int:
    return int(math.log2(modulation_order(modulation)))


def _square_grid(levels: int, scale: float) -> np.ndarray:
    amplitudes = np.arange(-(levels - 1), levels, 2, dtype=np.float64)
    # In-phase coordinate is the outer loop, quadrature the inner one.
    re, im = np.meshgrid(amplitudes, amplitudes, indexing="ij")
    return ((re + 1j * im) * scale).ravel()


@functools.lru_cache(maxsize=None)
def _constellation(modulation: str) -> np.ndarray:
    order = modulation_order(modulation)
    if order == 4:
        s = 1.0 / math.sqrt(2.0)
        points = np.array([s + 1j * s, -s + 1j * s, -s - 1j * s, s - 1j * s])
    elif order == 16:
        points = _square_grid(4, 1.0 / math.sqrt(10.0))
    else:
        points = _square_grid(8, 1.0 / math.sqrt(42.0))
    points.setflags(write=False)
    return points


def constellation(modulation: str) -> np.ndarray:
    """Return the unit-average-energy constellation; position is the label."""

    return _constellation(modulation).copy()


def _as_bits(bits) -> np.ndarray:
    arr = np.asarray(bits)
    if arr.ndim != 1:
        raise ValueError("bits must be a 1D array")
    if arr.size and not np.all((arr == 0) | (arr == 1)):
        raise ValueError("bits must contain only 0 and 1")
    return arr.astype(np.int64)


def modulate(bits, modulation: str) -> np.ndarray:
    """Map bits onto constellation points, ``log2(M)`` bits per symbol.

    Produces ``floor(len(bits) / log2(M))`` symbols. Trailing bits that do not
    fill a whole symbol are dropped rather than zero-padded.
    """

    k = bits_per_symbol(modulation)
    bits = _as_bits(bits)
    num_symbols = bits.size // k
    tail = bits.size - num_symbols * k
    if tail:
        logger.debug("Dropping %d trailing bits that do not fill a %s symbol", tail, modulation)
    if num_symbols == 0:
        return np.zeros(0, dtype=np.complex128)
    chunks = bits[: num_symbols * k].reshape(num_symbols, k)
    weights = 1 << np.arange(k - 1, -1, -1)
    indices = chunks @ weights
    return _constellation(modulation)[indices]


def demodulate(symbols, modulation: str) -> np.ndarray:
    """Minimum-distance hard decisions, emitted MSB first.

    Ties resolve to the lowest constellation index.
    """

    k = bits_per_symbol(modulation)
    symbols = np.asarray(symbols, dtype=np.complex128)
    if symbols.ndim != 1:
        raise ValueError("symbols must be a 1D array")
    if symbols.size == 0:
        return np.zeros(0, dtype=np.int8)
    points = _constellation(modulation)
    distances = np.abs(symbols[:, None] - points[None, :])
    indices = np.argmin(distances, axis=1)
    shifts = np.arange(k - 1, -1, -1)
    bits = (indices[:, None] >> shifts[None, :]) & 1
    return bits.reshape(-1).astype(np.int8)


__all__ = [
    "MODULATION_ORDERS",
    "modulation_order",
    "bits_per_symbol",
    "constellation",
    "modulate",
    "demodulate",
]

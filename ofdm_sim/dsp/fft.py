"""Recursive radix-2 Cooley-Tukey transform."""

from __future__ import annotations

import numpy as np

from ..errors import InvalidLengthError
from .complex_ops import as_complex, conjugate


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _check_power_of_two(n: int) -> None:
    if not is_power_of_two(n):
        raise InvalidLengthError(f"Transform length must be a power of two, got {n}")


def _fft_recursive(x: np.ndarray) -> np.ndarray:
    n = x.size
    if n <= 1:
        return x.copy()
    even = _fft_recursive(x[0::2])
    odd = _fft_recursive(x[1::2])
    half = n // 2
    twiddle = np.exp(-2j * np.pi * np.arange(half) / n)
    t = twiddle * odd
    out = np.empty(n, dtype=np.complex128)
    out[:half] = even + t
    out[half:] = even - t
    return out


def fft(x) -> np.ndarray:
    """Forward DFT, X[k] = sum_n x[n] e^{-j 2 pi k n / N}.

    Lengths 0 and 1 are returned unchanged; any other length must be a power
    of two. The input is never modified.
    """

    x = as_complex(x)
    if x.ndim != 1:
        raise InvalidLengthError("fft expects a 1D sequence")
    if x.size > 1:
        _check_power_of_two(x.size)
    return _fft_recursive(x)


def ifft(x) -> np.ndarray:
    """Inverse DFT computed as conj(fft(conj(x))) / N."""

    x = as_complex(x)
    if x.ndim != 1:
        raise InvalidLengthError("ifft expects a 1D sequence")
    n = x.size
    if n == 0:
        return x.copy()
    return conjugate(fft(conjugate(x))) / n


__all__ = ["is_power_of_two", "fft", "ifft"]

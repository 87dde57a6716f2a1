"""Complex arithmetic on numpy complex128 scalars and arrays.

numpy's ``complex128`` is the value type; these helpers pin down the few
places where the simulation needs a policy that plain operators do not give:
division refuses an (effectively) zero divisor instead of producing inf/nan,
and phase is reported in (-pi, pi].
"""

from __future__ import annotations

import numpy as np

from ..errors import DegenerateDivisionError

DIVISION_TOLERANCE = 1e-300


def as_complex(x) -> np.ndarray:
    return np.asarray(x, dtype=np.complex128)


def add(a, b) -> np.ndarray:
    return as_complex(a) + as_complex(b)


def subtract(a, b) -> np.ndarray:
    return as_complex(a) - as_complex(b)


def multiply(a, b) -> np.ndarray:
    return as_complex(a) * as_complex(b)


def divide(a, b, tol: float = DIVISION_TOLERANCE) -> np.ndarray:
    """Element-wise ``a / b``; raises if any ``|b|`` is below ``tol``."""

    a = as_complex(a)
    b = as_complex(b)
    if np.any(np.abs(b) < tol):
        raise DegenerateDivisionError("complex divisor magnitude is effectively zero")
    return a / b


def magnitude(a) -> np.ndarray:
    return np.abs(as_complex(a))


def phase(a) -> np.ndarray:
    """atan2(imag, real) in (-pi, pi]."""

    a = as_complex(a)
    angle = np.arctan2(a.imag, a.real)
    # atan2 yields -pi for (-x, -0.0); fold it onto +pi.
    return np.where(angle <= -np.pi, np.pi, angle)


def conjugate(a) -> np.ndarray:
    return np.conj(as_complex(a))


def from_polar(mag, angle) -> np.ndarray:
    mag = np.asarray(mag, dtype=np.float64)
    angle = np.asarray(angle, dtype=np.float64)
    return mag * np.cos(angle) + 1j * (mag * np.sin(angle))


__all__ = [
    "DIVISION_TOLERANCE",
    "as_complex",
    "add",
    "subtract",
    "multiply",
    "divide",
    "magnitude",
    "phase",
    "conjugate",
    "from_polar",
]

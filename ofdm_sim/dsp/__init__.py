"""Complex arithmetic and the power-of-two transform engine."""

from .complex_ops import add, subtract, multiply, divide, magnitude, phase, conjugate, from_polar
from .fft import fft, ifft

__all__ = [
    "add",
    "subtract",
    "multiply",
    "divide",
    "magnitude",
    "phase",
    "conjugate",
    "from_polar",
    "fft",
    "ifft",
]

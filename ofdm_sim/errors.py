"""Error taxonomy for the OFDM simulation core."""

from __future__ import annotations


class OFDMError(ValueError):
    """Base class for structural precondition failures."""


class InvalidLengthError(OFDMError):
    """A sequence length violates a transform or layout precondition."""


class ParameterOutOfRangeError(OFDMError):
    """A configuration value lies outside its accepted domain."""


class DegenerateDivisionError(OFDMError, ZeroDivisionError):
    """Division by a complex value whose magnitude is effectively zero."""


__all__ = [
    "OFDMError",
    "InvalidLengthError",
    "ParameterOutOfRangeError",
    "DegenerateDivisionError",
]

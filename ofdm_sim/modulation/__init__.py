"""QPSK / 16-QAM / 64-QAM mapping."""

from .qam import MODULATION_ORDERS, bits_per_symbol, constellation, demodulate, modulate, modulation_order

__all__ = [
    "MODULATION_ORDERS",
    "modulation_order",
    "bits_per_symbol",
    "constellation",
    "modulate",
    "demodulate",
]

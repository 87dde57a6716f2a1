"""Comb-pilot subcarrier layout and cyclic prefix handling.

Subcarrier ``i`` is a pilot whenever ``i % pilot_spacing == 0``; every pilot
carries the real amplitude ``pilot_power``. All other subcarriers carry data
symbols in order.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from ..errors import InvalidLengthError, ParameterOutOfRangeError

logger = logging.getLogger(__name__)

PILOT = 1
DATA = 0
NULL = -1


def _check_spacing(pilot_spacing: int) -> None:
    if pilot_spacing <= 0:
        raise ParameterOutOfRangeError("pilot_spacing must be positive")


def _as_frame(frame) -> np.ndarray:
    frame = np.asarray(frame, dtype=np.complex128)
    if frame.ndim != 1:
        raise InvalidLengthError("frame must be a 1D sequence")
    return frame


def pilot_indices(num_subcarriers: int, pilot_spacing: int) -> np.ndarray:
    _check_spacing(pilot_spacing)
    return np.arange(0, num_subcarriers, pilot_spacing)


def data_indices(num_subcarriers: int, pilot_spacing: int) -> np.ndarray:
    _check_spacing(pilot_spacing)
    idx = np.arange(num_subcarriers)
    return idx[idx % pilot_spacing != 0]


def num_data_subcarriers(num_subcarriers: int, pilot_spacing: int) -> int:
    return int(data_indices(num_subcarriers, pilot_spacing).size)


def insert_pilots(
    data_symbols,
    num_subcarriers: int,
    pilot_spacing: int,
    pilot_power: float,
) -> np.ndarray:
    """Build one frequency-domain OFDM symbol.

    Data positions are filled from the head of ``data_symbols``. Surplus
    symbols are ignored; data positions left over stay at zero.
    """

    data_symbols = _as_frame(data_symbols)
    frame = np.zeros(num_subcarriers, dtype=np.complex128)
    frame[pilot_indices(num_subcarriers, pilot_spacing)] = complex(pilot_power, 0.0)

    slots = data_indices(num_subcarriers, pilot_spacing)
    used = min(slots.size, data_symbols.size)
    frame[slots[:used]] = data_symbols[:used]
    if data_symbols.size > slots.size:
        logger.debug("%d data symbols exceed frame capacity and are unused", data_symbols.size - slots.size)
    return frame


def extract_pilots(frame, pilot_spacing: int) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(pilot_values, pilot_indices)`` in ascending index order."""

    frame = _as_frame(frame)
    indices = pilot_indices(frame.size, pilot_spacing)
    return frame[indices].copy(), indices


def extract_data(frame, pilot_spacing: int) -> np.ndarray:
    frame = _as_frame(frame)
    return frame[data_indices(frame.size, pilot_spacing)].copy()


def subcarrier_map(num_subcarriers: int, pilot_spacing: int, num_data_symbols: int) -> np.ndarray:
    """Role of every subcarrier: ``PILOT``, ``DATA`` or ``NULL`` (unfilled data slot)."""

    roles = np.full(num_subcarriers, NULL, dtype=np.int8)
    roles[pilot_indices(num_subcarriers, pilot_spacing)] = PILOT
    slots = data_indices(num_subcarriers, pilot_spacing)
    roles[slots[: max(0, num_data_symbols)]] = DATA
    return roles


def add_cyclic_prefix(signal, cp_length: int) -> np.ndarray:
    """Prepend the last ``cp_length`` samples; no-op unless ``0 < cp_length < len``."""

    signal = _as_frame(signal)
    if cp_length <= 0 or cp_length >= signal.size:
        return signal.copy()
    return np.concatenate([signal[-cp_length:], signal])


def remove_cyclic_prefix(signal, cp_length: int) -> np.ndarray:
    signal = _as_frame(signal)
    if cp_length <= 0 or cp_length >= signal.size:
        return signal.copy()
    return signal[cp_length:].copy()


__all__ = [
    "PILOT",
    "DATA",
    "NULL",
    "pilot_indices",
    "data_indices",
    "num_data_subcarriers",
    "insert_pilots",
    "extract_pilots",
    "extract_data",
    "subcarrier_map",
    "add_cyclic_prefix",
    "remove_cyclic_prefix",
]

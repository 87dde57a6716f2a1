"""Error-rate and estimation-error scoring."""

from __future__ import annotations

import numpy as np


def count_bit_errors(transmitted, received) -> int:
    """Hamming distance over the common prefix of both bit sequences."""

    tx = np.asarray(transmitted).reshape(-1)
    rx = np.asarray(received).reshape(-1)
    length = min(tx.size, rx.size)
    return int(np.count_nonzero(tx[:length] != rx[:length]))


def calculate_ber(transmitted, received) -> float:
    """Bit errors over ``min(len(tx), len(rx))``; 0.0 when nothing is compared."""

    length = min(np.asarray(transmitted).size, np.asarray(received).size)
    if length == 0:
        return 0.0
    return count_bit_errors(transmitted, received) / length


def channel_mse(estimate, reference) -> float:
    estimate = np.asarray(estimate, dtype=np.complex128)
    reference = np.asarray(reference, dtype=np.complex128)
    if estimate.shape != reference.shape:
        raise ValueError("estimate and reference must have the same shape")
    if estimate.size == 0:
        return 0.0
    return float(np.mean(np.abs(estimate - reference) ** 2))


__all__ = ["count_bit_errors", "calculate_ber", "channel_mse"]

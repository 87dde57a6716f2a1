"""One OFDM symbol through the full transmit / channel / receive chain."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..channel.awgn import add_awgn
from ..channel.multipath import MultipathChannel, apply_channel, frequency_response
from ..config import MultipathConfig, OFDMConfig
from ..dsp.fft import fft, ifft
from ..estimation.equalizer import equalize
from ..estimation.estimator import estimate_channel
from ..eval.metrics import calculate_ber, channel_mse
from ..modulation.qam import bits_per_symbol, demodulate, modulate
from ..ofdm.frame import (
    add_cyclic_prefix,
    extract_data,
    extract_pilots,
    insert_pilots,
    num_data_subcarriers,
    remove_cyclic_prefix,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Snapshot of every intermediate array of a single run."""

    transmitted_bits: np.ndarray
    received_bits: np.ndarray
    transmitted_symbols: np.ndarray
    received_symbols: np.ndarray
    equalized_symbols: np.ndarray
    time_signal: np.ndarray
    freq_signal: np.ndarray
    channel_response: np.ndarray
    channel_estimate: np.ndarray
    ber: float
    channel_mse: float
    channel: Optional[MultipathChannel] = None


def generate_random_bits(length: int, rng: np.random.Generator) -> np.ndarray:
    if length < 0:
        raise ValueError("length must be non-negative")
    return rng.integers(0, 2, size=length, dtype=np.int8)


def run_symbol(
    params: OFDMConfig,
    multipath: Optional[MultipathConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> SimulationResult:
    """Simulate one OFDM symbol and score it.

    ``multipath`` is only consulted when ``params.channel_type`` is
    ``"multipath"``; it defaults to the three-path manual channel. When no
    generator is passed one is seeded from ``params.seed``.
    """

    params.validate()
    if rng is None:
        rng = np.random.default_rng(params.seed)
    n = params.num_subcarriers

    num_bits = num_data_subcarriers(n, params.pilot_spacing) * bits_per_symbol(params.modulation)
    tx_bits = generate_random_bits(num_bits, rng)
    tx_symbols = modulate(tx_bits, params.modulation)
    freq_signal = insert_pilots(tx_symbols, n, params.pilot_spacing, params.pilot_power)

    time_signal = add_cyclic_prefix(ifft(freq_signal), params.cp_length)

    channel: Optional[MultipathChannel] = None
    if params.channel_type == "multipath":
        channel = (multipath or MultipathConfig()).to_channel(rng)
        max_delay = max(channel.delays) if channel.num_paths else 0.0
        if max_delay > params.cp_length:
            logger.debug("Largest path delay %.2f exceeds cp_length %d", max_delay, params.cp_length)
        received = apply_channel(time_signal, channel)
        channel_response = frequency_response(channel, n)
    else:
        received = time_signal.copy()
        channel_response = np.ones(n, dtype=np.complex128)

    received = add_awgn(received, params.snr_db, rng)
    received = remove_cyclic_prefix(received, params.cp_length)
    received_freq = fft(received[:n])

    pilots, pilot_idx = extract_pilots(received_freq, params.pilot_spacing)
    estimate = estimate_channel(
        pilots,
        pilot_idx,
        params.pilot_power,
        n,
        method=params.interpolation,
        dft_threshold=params.resolved_dft_threshold(),
    )
    equalized = equalize(received_freq, estimate, params.snr_db, method=params.equalizer)

    rx_symbols = extract_data(received_freq, params.pilot_spacing)
    eq_symbols = extract_data(equalized, params.pilot_spacing)
    rx_bits = demodulate(eq_symbols, params.modulation)
    ber = calculate_ber(tx_bits, rx_bits)

    logger.debug(
        "run_symbol: N=%d mod=%s snr=%.1f dB channel=%s interp=%s ber=%.4g",
        n,
        params.modulation,
        params.snr_db,
        params.channel_type,
        params.interpolation,
        ber,
    )
    return SimulationResult(
        transmitted_bits=tx_bits,
        received_bits=rx_bits,
        transmitted_symbols=tx_symbols,
        received_symbols=rx_symbols,
        equalized_symbols=eq_symbols,
        time_signal=time_signal,
        freq_signal=freq_signal,
        channel_response=channel_response,
        channel_estimate=estimate,
        ber=ber,
        channel_mse=channel_mse(estimate, channel_response),
        channel=channel,
    )


__all__ = ["SimulationResult", "generate_random_bits", "run_symbol"]

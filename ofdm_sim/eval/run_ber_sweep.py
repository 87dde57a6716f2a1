"""BER / channel-MSE sweep over SNR for one OFDM configuration."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from .. import config as global_config
from ..config import MultipathConfig, OFDMConfig
from ..sim.pipeline import run_symbol
from ..utils.seeding import make_rng
from .metrics import count_bit_errors

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "snr_db",
    "modulation",
    "interpolation",
    "channel_type",
    "symbols",
    "bits_total",
    "bit_errors",
    "ber",
    "channel_mse",
]


@dataclass
class SweepStats:
    bits_total: int = 0
    bit_errors: int = 0
    mse_sum: float = 0.0
    symbols: int = 0

    def update(self, bit_err: int, bits: int, mse: float) -> None:
        self.bits_total += bits
        self.bit_errors += bit_err
        self.mse_sum += mse
        self.symbols += 1

    def row(self) -> Dict[str, float]:
        ber = self.bit_errors / self.bits_total if self.bits_total > 0 else float("nan")
        mse = self.mse_sum / self.symbols if self.symbols > 0 else float("nan")
        return {
            "symbols": self.symbols,
            "bits_total": self.bits_total,
            "bit_errors": self.bit_errors,
            "ber": ber,
            "channel_mse": mse,
        }


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    defaults = global_config.DEFAULTS
    parser = argparse.ArgumentParser(description="OFDM BER sweep over SNR")
    parser.add_argument("--num_subcarriers", type=int, default=defaults.num_subcarriers)
    parser.add_argument("--cp_length", type=int, default=defaults.cp_length)
    parser.add_argument("--modulation", choices=list(global_config.MODULATIONS), default=defaults.modulation)
    parser.add_argument("--pilot_spacing", type=int, default=defaults.pilot_spacing)
    parser.add_argument("--pilot_power", type=float, default=defaults.pilot_power)
    parser.add_argument("--channel", choices=list(global_config.CHANNEL_TYPES), default=defaults.channel_type)
    parser.add_argument("--interpolation", choices=list(global_config.INTERPOLATIONS), default=defaults.interpolation)
    parser.add_argument("--dft_threshold", type=int, default=None, help="Delay-domain cutoff (defaults to N/4)")
    parser.add_argument("--equalizer", choices=list(global_config.EQUALIZERS), default=defaults.equalizer)
    parser.add_argument("--random_channel", action="store_true", help="Draw a fresh random multipath channel per symbol")
    parser.add_argument("--delay_spread", type=float, default=10.0)
    parser.add_argument("--num_paths", type=int, default=3)
    parser.add_argument("--snr_lo", type=float, required=True)
    parser.add_argument("--snr_hi", type=float, required=True)
    parser.add_argument("--snr_step", type=float, default=2.0)
    parser.add_argument("--symbols", type=int, default=100, help="OFDM symbols per SNR point")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--out", type=str, required=True, help="CSV output path")
    parser.add_argument("--plot", type=str, help="Optional plot path")
    parser.add_argument("--log-level", dest="log_level", default="WARNING")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.symbols <= 0:
        raise ValueError("--symbols must be positive")
    return args


def base_config(args: argparse.Namespace) -> OFDMConfig:
    params = OFDMConfig(
        num_subcarriers=args.num_subcarriers,
        cp_length=args.cp_length,
        modulation=args.modulation,
        pilot_spacing=args.pilot_spacing,
        pilot_power=args.pilot_power,
        channel_type=args.channel,
        interpolation=args.interpolation,
        dft_threshold=args.dft_threshold,
        equalizer=args.equalizer,
        seed=args.seed,
    )
    params.validate()
    return params


def run(args: argparse.Namespace) -> List[Dict[str, float]]:
    rng = make_rng(args.seed)
    params = base_config(args)
    multipath = MultipathConfig(
        use_random=args.random_channel,
        delay_spread=args.delay_spread,
        num_paths=args.num_paths,
    )

    snr_points = (
        np.arange(args.snr_lo, args.snr_hi + 1e-9, args.snr_step)
        if args.snr_step > 0
        else np.array([args.snr_lo])
    )
    rows: List[Dict[str, float]] = []

    for snr_db in snr_points:
        point = replace(params, snr_db=float(snr_db))
        stats = SweepStats()
        for _ in range(args.symbols):
            result = run_symbol(point, multipath, rng)
            bit_err = count_bit_errors(result.transmitted_bits, result.received_bits)
            stats.update(bit_err, result.transmitted_bits.size, result.channel_mse)

        row = stats.row()
        row.update(
            {
                "snr_db": float(snr_db),
                "modulation": params.modulation,
                "interpolation": params.interpolation,
                "channel_type": params.channel_type,
            }
        )
        logger.info("SNR %.1f dB: BER %.4e over %d bits", snr_db, row["ber"], row["bits_total"])
        rows.append(row)

    return rows


def write_csv(rows: List[Dict[str, float]], path: Path) -> None:
    if not rows:
        return
    with path.open("w") as f:
        f.write(",".join(CSV_HEADER) + "\n")
        for row in rows:
            f.write(",".join(str(row[col]) for col in CSV_HEADER) + "\n")


def plot_rows(rows: List[Dict[str, float]], path: Path) -> None:
    if not rows:
        return
    rows_sorted = sorted(rows, key=lambda r: r["snr_db"])
    snrs = [r["snr_db"] for r in rows_sorted]
    # Zero-error points would vanish on a log axis.
    floor = 0.5 / max(max(r["bits_total"] for r in rows_sorted), 1)
    bers = [max(r["ber"], floor) for r in rows_sorted]
    plt.figure(figsize=(6, 4))
    plt.semilogy(snrs, bers, "o-", label=f"{rows_sorted[0]['modulation']} / {rows_sorted[0]['interpolation']}")
    plt.xlabel("SNR (dB)")
    plt.ylabel("BER")
    plt.grid(True, which="both", ls="--", alpha=0.4)
    plt.legend()
    plt.tight_layout()
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(path, dpi=200)
    plt.close()


def main(argv: Optional[Iterable[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    rows = run(args)
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    write_csv(rows, out_path)
    if args.plot:
        plot_rows(rows, Path(args.plot))
    for row in rows:
        print(f"  SNR {row['snr_db']:6.1f} dB : BER {row['ber']:.4e}  channel MSE {row['channel_mse']:.4e}")


if __name__ == "__main__":
    main()

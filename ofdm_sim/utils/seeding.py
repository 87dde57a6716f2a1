"""Deterministic seeding helpers."""

from __future__ import annotations

from typing import Optional

import numpy as np


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Return an explicit generator; every random stage takes one of these."""

    return np.random.default_rng(seed)


__all__ = ["make_rng"]

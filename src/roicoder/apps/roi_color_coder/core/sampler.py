"""LUT sampling: normalized value → RGB color.

Discrete mode picks ``floor(t * (N - 1) + 0.5)`` (round half up). Continuous
mode interpolates linearly between the two bracketing entries and rounds each
channel half up. Both are pure functions of ``(lut, t, mode)``; the scalar and
vectorized forms return identical colors so region fills and legend ramps
always agree.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Union

import numpy as np

from roicoder.libs.lut import RGB, InvalidLUTError, LookupTable

from .models import SamplingMode

ModeLike = Union[SamplingMode, str]


def _ensure_lut(lut: object) -> LookupTable:
    if not isinstance(lut, LookupTable):
        raise InvalidLUTError(f"Expected a LookupTable, got {type(lut).__name__}")
    return lut


def _clamp_unit(t: float) -> float:
    t = float(t)
    if math.isnan(t):
        return 0.0
    return min(1.0, max(0.0, t))


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def sample_many(lut: LookupTable, ts: Iterable[float], mode: ModeLike) -> List[RGB]:
    """Sample the LUT at every position in *ts*."""

    lut = _ensure_lut(lut)
    sampling = SamplingMode(mode)
    positions = np.asarray([_clamp_unit(t) for t in ts], dtype=np.float64)
    if positions.size == 0:
        return []

    table = lut.as_array()
    last = len(lut) - 1
    scaled = positions * last

    if sampling is SamplingMode.DISCRETE:
        indices = np.clip(_round_half_up(scaled).astype(int), 0, last)
        rgb = table[indices]
    else:
        lower = np.clip(np.floor(scaled).astype(int), 0, last)
        upper = np.minimum(lower + 1, last)
        frac = (scaled - lower)[:, None]
        rgb = _round_half_up(table[lower] * (1.0 - frac) + table[upper] * frac)

    rgb = np.clip(rgb, 0, 255).astype(int)
    return [(int(r), int(g), int(b)) for r, g, b in rgb]


def sample(lut: LookupTable, t: float, mode: ModeLike = SamplingMode.CONTINUOUS) -> RGB:
    """Return the color of *lut* at normalized position *t* (clamped to [0, 1])."""
    return sample_many(lut, [t], mode)[0]

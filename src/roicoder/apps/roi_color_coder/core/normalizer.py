"""Range computation and normalization of measurements.

Percentile clamping uses linear interpolation between order statistics
(Hyndman & Fan type 7, numpy's ``linear`` method): for ``n`` sorted finite
values the ``p``-th percentile sits at rank ``(n - 1) * p / 100`` and is
interpolated between the two neighbouring values.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidRangeError
from .models import MeasurementRange

logger = logging.getLogger(__name__)

DEGENERATE_POSITION = 0.5


def is_missing(value: object) -> bool:
    """True for ``None``, non-numeric values and values with no finite float form."""
    if value is None or isinstance(value, bool):
        return True
    try:
        return not math.isfinite(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return True


def finite_values(measurements: Iterable[object]) -> np.ndarray:
    """Return the usable measurements as a float64 array, missing entries dropped."""
    return np.asarray(
        [float(value) for value in measurements if not is_missing(value)],  # type: ignore[arg-type]
        dtype=np.float64,
    )


def _validate_override(override: Sequence[float]) -> Tuple[float, float]:
    if len(override) != 2:
        raise InvalidRangeError("Range override must be a (min, max) pair")
    low, high = float(override[0]), float(override[1])
    if not (math.isfinite(low) and math.isfinite(high)):
        raise InvalidRangeError(f"Range override bounds must be finite, got ({low}, {high})")
    if low > high:
        raise InvalidRangeError(
            f"Range override minimum {low} is greater than maximum {high}"
        )
    return low, high


def _validate_percentiles(clamp: Sequence[float]) -> Tuple[float, float]:
    if len(clamp) != 2:
        raise InvalidRangeError("Clamp percentiles must be a (low, high) pair")
    low, high = float(clamp[0]), float(clamp[1])
    if not (0.0 <= low <= high <= 100.0):
        raise InvalidRangeError(
            f"Clamp percentiles must satisfy 0 <= low <= high <= 100, got ({low}, {high})"
        )
    return low, high


def compute_range(
    measurements: Iterable[object],
    override: Optional[Sequence[float]] = None,
    clamp_percentile: Optional[Sequence[float]] = None,
) -> MeasurementRange:
    """Compute the effective measurement range.

    An override wins over everything else. Otherwise the range spans the
    finite measurements, or the requested percentiles of them when
    ``clamp_percentile`` is given.
    """

    if override is not None:
        low, high = _validate_override(override)
        if clamp_percentile is not None:
            logger.debug("Range override supplied; ignoring clamp percentiles %s", clamp_percentile)
        return MeasurementRange(minimum=low, maximum=high, overridden=True)

    percentiles = _validate_percentiles(clamp_percentile) if clamp_percentile is not None else None

    values = finite_values(measurements)
    if values.size == 0:
        raise InvalidRangeError(
            "All measurements are missing and no range override was given"
        )

    if percentiles is None:
        return MeasurementRange(minimum=float(values.min()), maximum=float(values.max()))

    low, high = np.percentile(values, percentiles, method="linear")
    logger.debug(
        "Clamped range to percentiles %s of %d values: [%s, %s]",
        percentiles,
        values.size,
        low,
        high,
    )
    return MeasurementRange(
        minimum=float(low), maximum=float(high), clamp_percentile=percentiles
    )


def normalize(value: float, value_range: MeasurementRange) -> float:
    """Map *value* into ``[0, 1]``; values outside the range saturate.

    A degenerate range maps every value to the midpoint.
    """

    if value_range.is_degenerate:
        return DEGENERATE_POSITION
    t = (float(value) - value_range.minimum) / value_range.span
    return min(1.0, max(0.0, t))

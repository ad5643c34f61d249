"""Tick label formatting for legends."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

MAX_AUTO_DECIMALS = 6
SCIENTIFIC_UPPER = 1e5
_DEFAULT_SCIENTIFIC_DIGITS = 2


@dataclass(frozen=True)
class LabelFormatter:
    """Format legend tick values.

    ``decimal_places=None`` picks the fewest decimals (up to six) that render
    every tick value exactly. ``scientific=None`` switches to scientific
    notation when the largest magnitude is at least ``1e5`` or is non-zero
    but too small to show with the chosen decimals. Automatic scientific
    labels get the fewest mantissa digits (two to six) that keep distinct
    tick values apart.
    """

    decimal_places: Optional[int] = None
    scientific: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.decimal_places is not None and self.decimal_places < 0:
            raise ValueError("Decimal places must be zero or positive")

    def format_all(self, values: Sequence[float]) -> List[str]:
        """Format *values* with one shared precision and notation."""
        if not values:
            return []
        decimals = self._resolve_decimals(values)
        if self._use_scientific(values, decimals):
            digits = (
                self.decimal_places
                if self.decimal_places is not None
                else _resolve_mantissa_digits(values)
            )
            return [_clean_zero(f"{value:.{digits}e}") for value in values]
        return [_clean_zero(f"{value:.{decimals}f}") for value in values]

    def format(self, value: float) -> str:
        return self.format_all([value])[0]

    def _resolve_decimals(self, values: Sequence[float]) -> int:
        if self.decimal_places is not None:
            return self.decimal_places
        for decimals in range(MAX_AUTO_DECIMALS + 1):
            if all(_survives_rounding(value, decimals) for value in values):
                return decimals
        return MAX_AUTO_DECIMALS

    def _use_scientific(self, values: Sequence[float], decimals: int) -> bool:
        if self.scientific is not None:
            return self.scientific
        magnitude = max(abs(value) for value in values)
        if magnitude >= SCIENTIFIC_UPPER:
            return True
        return 0.0 < magnitude < 10.0 ** (-decimals)


def _resolve_mantissa_digits(values: Sequence[float]) -> int:
    distinct = len(set(values))
    for digits in range(_DEFAULT_SCIENTIFIC_DIGITS, MAX_AUTO_DECIMALS + 1):
        labels = {_clean_zero(f"{value:.{digits}e}") for value in values}
        if len(labels) == distinct:
            return digits
    return MAX_AUTO_DECIMALS


def _survives_rounding(value: float, decimals: int) -> bool:
    rounded = round(value, decimals)
    return math.isclose(rounded, value, rel_tol=1e-9, abs_tol=1e-12)


def _clean_zero(text: str) -> str:
    # "-0", "-0.00" and "-0.00e+00" read better without the sign
    if text.startswith("-") and float(text) == 0.0:
        return text[1:]
    return text

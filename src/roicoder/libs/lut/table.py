"""Immutable lookup table (LUT) type shared by the color coder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

RGB = Tuple[int, int, int]

MIN_LUT_ENTRIES = 2


class InvalidLUTError(ValueError):
    """Raised when a lookup table is empty, too short or malformed."""


def _coerce_color(value: object, index: int) -> RGB:
    try:
        channels = tuple(value)  # type: ignore[arg-type]
    except TypeError as exc:
        raise InvalidLUTError(f"LUT entry {index} is not an RGB triple: {value!r}") from exc
    if len(channels) != 3:
        raise InvalidLUTError(
            f"LUT entry {index} has {len(channels)} channels, expected 3"
        )
    result = []
    for channel in channels:
        if isinstance(channel, bool) or not isinstance(channel, (int, np.integer)):
            raise InvalidLUTError(
                f"LUT entry {index} has a non-integer channel: {channel!r}"
            )
        if not 0 <= int(channel) <= 255:
            raise InvalidLUTError(
                f"LUT entry {index} channel {channel} is outside 0..255"
            )
        result.append(int(channel))
    return (result[0], result[1], result[2])


@dataclass(frozen=True)
class LookupTable:
    """Ordered palette of ``N >= 2`` RGB colors."""

    name: str
    colors: Tuple[RGB, ...]

    def __post_init__(self) -> None:
        colors = tuple(
            _coerce_color(color, index) for index, color in enumerate(self.colors)
        )
        if len(colors) < MIN_LUT_ENTRIES:
            raise InvalidLUTError(
                f"LUT '{self.name}' has {len(colors)} entries; at least "
                f"{MIN_LUT_ENTRIES} are required"
            )
        object.__setattr__(self, "colors", colors)

    def __len__(self) -> int:
        return len(self.colors)

    def as_array(self) -> np.ndarray:
        """Return the table as an ``(N, 3)`` float64 array."""
        return np.asarray(self.colors, dtype=np.float64)

    def reversed(self) -> "LookupTable":
        return LookupTable(name=f"{self.name} (inverted)", colors=self.colors[::-1])

    @classmethod
    def from_colors(cls, name: str, colors: Iterable[Sequence[int]]) -> "LookupTable":
        return cls(name=name, colors=tuple(tuple(color) for color in colors))  # type: ignore[misc]

    @classmethod
    def from_control_points(
        cls, name: str, points: Sequence[Sequence[int]], *, size: int = 256
    ) -> "LookupTable":
        """Build a ``size``-entry table by interpolating evenly spaced control points."""

        if len(points) < MIN_LUT_ENTRIES:
            raise InvalidLUTError(
                f"LUT '{name}' needs at least {MIN_LUT_ENTRIES} control points"
            )
        stops = np.asarray(points, dtype=np.float64)
        stop_positions = np.linspace(0.0, 1.0, len(points))
        positions = np.linspace(0.0, 1.0, size)
        channels = [
            np.interp(positions, stop_positions, stops[:, channel])
            for channel in range(3)
        ]
        table = np.floor(np.stack(channels, axis=1) + 0.5).astype(int)
        return cls(name=name, colors=tuple(tuple(int(v) for v in row) for row in table))  # type: ignore[misc]

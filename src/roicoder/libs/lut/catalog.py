"""Catalog of built-in palettes, addressable by name."""

from __future__ import annotations

import colorsys
from typing import Callable, Dict, List

from .table import InvalidLUTError, LookupTable

# Control points are spread evenly over a 256-entry table.
_GRADIENT_STOPS: Dict[str, List[tuple]] = {
    "grays": [(0, 0, 0), (255, 255, 255)],
    "fire": [
        (0, 0, 0),
        (0, 0, 124),
        (98, 0, 226),
        (195, 0, 138),
        (252, 39, 0),
        (255, 133, 0),
        (255, 213, 0),
        (255, 255, 255),
    ],
    "ice": [
        (255, 255, 255),
        (128, 255, 255),
        (0, 160, 255),
        (0, 0, 200),
        (0, 0, 64),
    ],
    "thermal": [
        (0, 0, 0),
        (64, 0, 128),
        (128, 0, 160),
        (200, 0, 100),
        (255, 64, 0),
        (255, 160, 0),
        (255, 230, 60),
        (255, 255, 255),
    ],
    "viridis": [
        (68, 1, 84),
        (72, 40, 120),
        (62, 74, 137),
        (49, 104, 142),
        (38, 130, 142),
        (31, 158, 137),
        (53, 183, 121),
        (109, 205, 89),
        (180, 222, 44),
        (253, 231, 37),
    ],
    "red_green": [(255, 0, 0), (0, 0, 0), (0, 255, 0)],
    "cyan_magenta": [(0, 255, 255), (0, 0, 0), (255, 0, 255)],
}

# Palettes used as-is: every entry is a distinct band.
_DISCRETE_ENTRIES: Dict[str, List[tuple]] = {
    "16_colors": [
        (0, 0, 0),
        (1, 1, 171),
        (1, 1, 224),
        (0, 110, 255),
        (1, 171, 254),
        (1, 224, 254),
        (1, 254, 1),
        (190, 255, 0),
        (255, 255, 0),
        (255, 224, 0),
        (255, 141, 0),
        (250, 94, 0),
        (245, 0, 0),
        (245, 0, 108),
        (222, 180, 222),
        (255, 255, 255),
    ],
    "blue_white_red": [(0, 0, 255), (255, 255, 255), (255, 0, 0)],
}


def _spectrum() -> LookupTable:
    colors = []
    for index in range(256):
        r, g, b = colorsys.hsv_to_rgb(index / 256.0, 1.0, 1.0)
        colors.append((int(r * 255 + 0.5), int(g * 255 + 0.5), int(b * 255 + 0.5)))
    return LookupTable.from_colors("spectrum", colors)


_FACTORIES: Dict[str, Callable[[], LookupTable]] = {"spectrum": _spectrum}
for _name, _stops in _GRADIENT_STOPS.items():
    _FACTORIES[_name] = (
        lambda name=_name, stops=_stops: LookupTable.from_control_points(name, stops)
    )
for _name, _entries in _DISCRETE_ENTRIES.items():
    _FACTORIES[_name] = (
        lambda name=_name, entries=_entries: LookupTable.from_colors(name, entries)
    )

_CACHE: Dict[str, LookupTable] = {}


def normalise_lut_name(name: str) -> str:
    """Fold case and treat spaces, dashes and underscores alike."""
    return "_".join(name.strip().lower().replace("-", " ").replace("_", " ").split())


def available_luts() -> List[str]:
    return sorted(_FACTORIES)


def get_lut(name: str) -> LookupTable:
    """Return the built-in palette registered under *name*."""

    key = normalise_lut_name(name)
    if key not in _FACTORIES:
        raise InvalidLUTError(
            f"Unknown LUT '{name}'. Available: {', '.join(available_luts())}"
        )
    if key not in _CACHE:
        _CACHE[key] = _FACTORIES[key]()
    return _CACHE[key]

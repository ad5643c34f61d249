"""Error taxonomy for ROI color coding runs."""

from __future__ import annotations

from roicoder.libs.lut import InvalidLUTError

__all__ = [
    "ColorCoderError",
    "InvalidLUTError",
    "InvalidRangeError",
    "UnknownRegionMeasurement",
]


class ColorCoderError(Exception):
    """Base class for color coder failures."""


class InvalidRangeError(ColorCoderError, ValueError):
    """No usable measurement range: bad override bounds, bad clamp, or no data.

    Fatal to a run and raised before any painting happens.
    """


class UnknownRegionMeasurement(ColorCoderError, KeyError):
    """A region has no usable measurement.

    The engine never raises this: the condition is resolved per region through
    the no-data policy. It exists so hosts that look measurements up
    themselves can signal the same condition.
    """

    def __init__(self, region_id: str) -> None:
        super().__init__(region_id)
        self.region_id = region_id

    def __str__(self) -> str:
        return f"No measurement available for region '{self.region_id}'"

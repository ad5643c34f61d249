"""ROI color coder core: range normalization, LUT sampling, region colorization
and legend rendering, plus the engine that runs them as one validated pass."""

from .colorizer import colorize, paint_regions
from .engine import ColorCodingEngine
from .errors import (
    ColorCoderError,
    InvalidLUTError,
    InvalidRangeError,
    UnknownRegionMeasurement,
)
from .formatting import LabelFormatter
from .legend import render_legend
from .models import (
    ColorAssignment,
    ColorCodingResult,
    FillStyle,
    Legend,
    LegendOrientation,
    LegendTick,
    MeasurementRange,
    NoDataPolicy,
    PaintStyle,
    Region,
    SamplingMode,
)
from .normalizer import compute_range, normalize
from .sampler import sample, sample_many

__all__ = [
    "ColorAssignment",
    "ColorCoderError",
    "ColorCodingEngine",
    "ColorCodingResult",
    "FillStyle",
    "InvalidLUTError",
    "InvalidRangeError",
    "LabelFormatter",
    "Legend",
    "LegendOrientation",
    "LegendTick",
    "MeasurementRange",
    "NoDataPolicy",
    "PaintStyle",
    "Region",
    "SamplingMode",
    "UnknownRegionMeasurement",
    "colorize",
    "compute_range",
    "normalize",
    "paint_regions",
    "render_legend",
    "sample",
    "sample_many",
]

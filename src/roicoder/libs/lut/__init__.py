"""Lookup table (palette) primitives: the immutable table type, the built-in
catalog and readers for custom LUT files."""

from .catalog import available_luts, get_lut, normalise_lut_name
from .io import load_lut
from .table import RGB, InvalidLUTError, LookupTable

__all__ = [
    "RGB",
    "InvalidLUTError",
    "LookupTable",
    "available_luts",
    "get_lut",
    "load_lut",
    "normalise_lut_name",
]

"""Measurement-driven ROI color coding: LUT mapping, region painting and legends."""

__version__ = "0.1.0"

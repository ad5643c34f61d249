"""Measurement-driven ROI color coding application."""

"""Reusable libraries shared by ROI color coder applications."""

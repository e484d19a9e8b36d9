"""Rainfall patterns, elevation readers, flood models and rendering on grids."""

__version__ = "0.1.0"
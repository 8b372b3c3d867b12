"""Aggregate raw form coverage into per-line and per-file stats and render reports."""

__version__ = "0.1.0"

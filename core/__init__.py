"""Core package exports for the distance-series viewer."""

# Re-export commonly used modules for convenience.
from . import budget, decimate, ingest, limits, pipeline, segments, series, view_window, viewport

__all__ = [
    "budget",
    "decimate",
    "ingest",
    "limits",
    "pipeline",
    "segments",
    "series",
    "view_window",
    "viewport",
]

"""Restrict a series to the visible distance window."""
from __future__ import annotations

from dataclasses import dataclass

from core.series import Point, Series, is_gap

__all__ = [
    "DEFAULT_BUFFER_FRACTION",
    "DEFAULT_BUFFER_CAP",
    "Viewport",
    "viewport_buffer",
    "filter_window",
]

DEFAULT_BUFFER_FRACTION = 0.1
DEFAULT_BUFFER_CAP = 100.0  # metres


@dataclass(frozen=True)
class Viewport:
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def ordered(self) -> "Viewport":
        if self.max < self.min:
            return Viewport(self.max, self.min)
        return self


def viewport_buffer(
    viewport: Viewport,
    fraction: float = DEFAULT_BUFFER_FRACTION,
    cap: float = DEFAULT_BUFFER_CAP,
) -> float:
    """Margin added on both sides of the viewport.

    A zero-width viewport is treated as spanning 1 distance unit.
    """
    span = viewport.ordered().span or 1.0
    return min(span * fraction, cap)


def filter_window(
    series: Series,
    viewport: Viewport,
    *,
    fraction: float = DEFAULT_BUFFER_FRACTION,
    cap: float = DEFAULT_BUFFER_CAP,
) -> list[Point]:
    """Return points inside the buffered viewport plus every discontinuity marker.

    The series is only sorted within each source file, so this is a linear
    scan rather than a binary search.
    """
    view = viewport.ordered()
    buffer = viewport_buffer(view, fraction, cap)
    lo = view.min - buffer
    hi = view.max + buffer
    return [p for p in series if is_gap(p) or lo <= p.distance <= hi]

"""Helpers for moving the distance viewport (pan/zoom/drag) with clamping."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.series import Series, is_gap
from core.viewport import Viewport


@dataclass(frozen=True)
class WindowLimits:
    span_min: float = 1.0
    span_max: float = 100_000.0


def full_extent(series: Series) -> Optional[Viewport]:
    """Smallest viewport covering every reading, or ``None`` if there is none."""
    lo = hi = None
    for p in series:
        if is_gap(p):
            continue
        if lo is None or p.distance < lo:
            lo = p.distance
        if hi is None or p.distance > hi:
            hi = p.distance
    if lo is None:
        return None
    return Viewport(float(lo), float(hi))


def clamp_viewport(view: Viewport, *, extent: Viewport, limits: WindowLimits) -> Viewport:
    view = view.ordered()
    extent = extent.ordered()
    span = max(limits.span_min, min(limits.span_max, view.span))
    # data shorter than the minimum window: show all of it
    if extent.span < limits.span_min:
        return extent
    span = min(span, extent.span)
    start = max(extent.min, min(view.min, extent.max - span))
    return Viewport(start, start + span)


def pan_viewport(view: Viewport, delta: float, *, extent: Viewport, limits: WindowLimits) -> Viewport:
    return clamp_viewport(
        Viewport(view.min + delta, view.max + delta), extent=extent, limits=limits
    )


def zoom_viewport(
    view: Viewport, factor: float, *, anchor: float, extent: Viewport, limits: WindowLimits
) -> Viewport:
    if factor <= 0:
        raise ValueError("factor must be positive")
    view = view.ordered()
    span_new = view.span * factor
    span_new = max(limits.span_min, min(limits.span_max, span_new))

    # keep anchor position (relative 0..1) within window
    rel = 0.0
    if view.span > 0:
        rel = (anchor - view.min) / view.span
    rel = min(1.0, max(0.0, rel))

    start_new = anchor - rel * span_new
    return clamp_viewport(
        Viewport(start_new, start_new + span_new), extent=extent, limits=limits
    )


def viewport_from_drag(x0: float, x1: float, *, min_width: float = 0.0) -> Optional[Viewport]:
    """Viewport for a drag-to-zoom gesture between two distances.

    Returns ``None`` for a drag narrower than ``min_width`` (a click).
    """
    lo, hi = (x0, x1) if x0 <= x1 else (x1, x0)
    if hi - lo <= min_width:
        return None
    return Viewport(lo, hi)

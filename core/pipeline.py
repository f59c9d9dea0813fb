"""Viewport-aware, gap-aware reduction of a series for one render frame.

``reduce_series`` chains the viewport filter, segment splitter, budget
allocator, LTTB sampler and assembler. Every call is independent: nothing is
cached and the input is never modified, so callers may memoise on
``(series, viewport, budget)`` if they need to.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from core.budget import allocate, count_readings
from core.decimate import lttb_segment
from core.segments import assemble, split_segments
from core.series import Point, Series
from core.viewport import DEFAULT_BUFFER_CAP, DEFAULT_BUFFER_FRACTION, Viewport, filter_window

__all__ = ["DEFAULT_MAX_POINTS", "ReduceSettings", "decimate_segments", "reduce_series"]

LOG = logging.getLogger(__name__)

DEFAULT_MAX_POINTS = 4000


def decimate_segments(series: Series, budget: int) -> list[Point]:
    """Downsample each gap-free run of ``series`` to its share of ``budget``."""
    if not series:
        return []
    segments = split_segments(series)
    total = count_readings(segments)
    if total <= budget:
        LOG.debug("%d readings within budget %d; no sampling", total, budget)
        return list(series)

    thresholds = allocate(segments, budget)
    outputs = [
        None if threshold is None else lttb_segment(seg.points, threshold)
        for seg, threshold in zip(segments, thresholds)
    ]
    result = assemble(segments, outputs)
    LOG.debug(
        "Reduced %d readings in %d segments to %d points (budget %d)",
        total,
        len(segments),
        len(result),
        budget,
    )
    return result


def reduce_series(
    series: Series,
    viewport: Viewport,
    budget: int = DEFAULT_MAX_POINTS,
    *,
    buffer_fraction: float = DEFAULT_BUFFER_FRACTION,
    buffer_cap: float = DEFAULT_BUFFER_CAP,
) -> list[Point]:
    """Return the points to draw for ``viewport`` with at most ~``budget`` readings.

    Discontinuity markers always survive, so separate source files are never
    joined by a line. If the visible readings already fit the budget the
    filtered series is returned unchanged.
    """
    visible = filter_window(series, viewport, fraction=buffer_fraction, cap=buffer_cap)
    return decimate_segments(visible, budget)


@dataclass(frozen=True)
class ReduceSettings:
    budget: int = DEFAULT_MAX_POINTS
    buffer_fraction: float = DEFAULT_BUFFER_FRACTION
    buffer_cap: float = DEFAULT_BUFFER_CAP

    def reduce(self, series: Series, viewport: Viewport) -> list[Point]:
        return reduce_series(
            series,
            viewport,
            self.budget,
            buffer_fraction=self.buffer_fraction,
            buffer_cap=self.buffer_cap,
        )

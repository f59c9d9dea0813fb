"""Share a global point budget across line segments."""
from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from core.segments import Segment

__all__ = ["MIN_SEGMENT_POINTS", "count_readings", "local_budget", "allocate"]

LOG = logging.getLogger(__name__)

# first point, one interior pick, last point
MIN_SEGMENT_POINTS = 3


def count_readings(segments: Sequence[Segment]) -> int:
    return sum(len(seg) for seg in segments if seg.is_line)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def local_budget(n: int, total: int, budget: int) -> int:
    """Points a segment of ``n`` readings may keep out of ``budget`` for ``total``."""
    if total <= 0:
        raise ValueError("total must be positive")
    return max(MIN_SEGMENT_POINTS, _round_half_up(n / total * budget))


def allocate(segments: Sequence[Segment], budget: int) -> list[Optional[int]]:
    """Return one entry per segment: its sampling threshold, or ``None`` to keep it whole.

    Gap segments, segments of three points or fewer and segments already
    within their share are never sampled. When the readings as a whole fit
    the budget nothing is sampled at all.
    """
    keep: list[Optional[int]] = [None] * len(segments)
    total = count_readings(segments)
    if total == 0 or total <= budget:
        return keep
    if budget < MIN_SEGMENT_POINTS:
        LOG.debug("Budget %d too small to reduce; passing %d readings through", budget, total)
        return keep

    for idx, seg in enumerate(segments):
        n = len(seg)
        if not seg.is_line or n <= MIN_SEGMENT_POINTS:
            continue
        b = local_budget(n, total, budget)
        if n > b:
            keep[idx] = b
    return keep

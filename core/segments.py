"""Split a series at discontinuities and stitch processed segments back together."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from core.series import Point, Series, is_gap

__all__ = ["LINE", "GAP", "Segment", "split_segments", "assemble"]

LINE = "line"
GAP = "gap"


@dataclass(frozen=True)
class Segment:
    kind: str  # LINE or GAP
    points: tuple[Point, ...]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_line(self) -> bool:
        return self.kind == LINE


def split_segments(series: Series) -> list[Segment]:
    """Partition ``series`` into maximal runs of readings and single-marker gaps.

    Readings with a missing or non-numeric value split the series the same way
    an explicit marker does. Empty runs (e.g. before a leading marker) are
    dropped, so every segment has at least one point.
    """
    segments: list[Segment] = []
    start = None
    for idx, point in enumerate(series):
        if is_gap(point):
            if start is not None:
                segments.append(Segment(LINE, tuple(series[start:idx])))
                start = None
            segments.append(Segment(GAP, (point,)))
        elif start is None:
            start = idx
    if start is not None:
        segments.append(Segment(LINE, tuple(series[start:])))
    return segments


def assemble(
    segments: Sequence[Segment],
    outputs: Optional[Sequence[Optional[Sequence[Point]]]] = None,
) -> list[Point]:
    """Concatenate segments in order.

    ``outputs`` runs parallel to ``segments``; an entry replaces the points of
    a line segment, ``None`` keeps the segment as it is. Gap segments are
    always emitted untouched.
    """
    if outputs is None:
        outputs = [None] * len(segments)
    elif len(outputs) != len(segments):
        raise ValueError("outputs must run parallel to segments")

    parts = [
        seg.points if out is None or not seg.is_line else out
        for seg, out in zip(segments, outputs)
    ]
    result: list[Point] = [None] * sum(len(part) for part in parts)  # type: ignore[list-item]
    pos = 0
    for part in parts:
        end = pos + len(part)
        result[pos:end] = part
        pos = end
    return result

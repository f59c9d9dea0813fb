"""Point types for distance-indexed series."""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Sequence, Union

__all__ = ["Reading", "Gap", "Point", "Series", "is_gap", "reading_count"]


@dataclass(frozen=True)
class Reading:
    """One observation at ``distance``; ``source_id`` names the file it came from."""

    distance: float
    value: float
    source_id: str | None = None


@dataclass(frozen=True)
class Gap:
    """Discontinuity marker: the line must not be connected across it.

    ``distance`` is the last distance of the preceding source file.
    """

    distance: float
    source_id: str | None = None


Point = Union[Reading, Gap]
Series = Sequence[Point]


def is_gap(point: Point) -> bool:
    """True for markers and for readings whose value is missing or not a real number."""
    if isinstance(point, Gap):
        return True
    value = point.value
    if value is None or isinstance(value, bool) or not isinstance(value, numbers.Real):
        return True
    return math.isnan(value)


def reading_count(series: Series) -> int:
    return sum(1 for p in series if not is_gap(p))

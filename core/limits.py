# core/limits.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional
import re

__all__ = [
    "Limit",
    "CHANNEL_ID_RANGES",
    "parse_limits",
    "format_limits",
    "limits_for_channel",
    "next_custom_id",
]

# custom id ranges reserved for each fibre channel
CHANNEL_ID_RANGES = {
    "1": (100, 299),
    "2": (300, 499),
    "3": (500, 699),
}

_BLOCK_RE = re.compile(r"<threshold>(.*?)</threshold>", re.DOTALL)


@dataclass(frozen=True)
class Limit:
    """
    Threshold region drawn over the chart.
    - [start, end] is a distance interval.
    - threshold is the alarm level; tolerance and type are passed to the
      acquisition unit as-is.
    """
    custom_id: int
    start: float
    end: float
    threshold: float
    tolerance: int = 5
    type: int = 3


def _tag(block: str, tag: str) -> Optional[str]:
    m = re.search(rf"<{tag}>(.*?)</{tag}>", block)
    return m.group(1).strip() if m else None


def parse_limits(text: str) -> list[Limit]:
    """
    Parse <threshold> blocks. Blocks missing id, pos_start, pos_stop or value,
    or with unparsable numbers, are skipped.
    """
    out: list[Limit] = []
    for m in _BLOCK_RE.finditer(text):
        block = m.group(1)
        raw_id = _tag(block, "id")
        raw_start = _tag(block, "pos_start")
        raw_stop = _tag(block, "pos_stop")
        raw_value = _tag(block, "value")
        if not (raw_id and raw_start and raw_stop and raw_value):
            continue
        raw_tol = _tag(block, "tolerance")
        raw_type = _tag(block, "type")
        try:
            limit = Limit(
                custom_id=int(raw_id),
                start=float(raw_start),
                end=float(raw_stop),
                threshold=float(raw_value),
                tolerance=int(raw_tol) if raw_tol else 5,
                type=int(raw_type) if raw_type else 3,
            )
        except ValueError:
            continue
        out.append(limit)
    return out


def format_limits(limits: Iterable[Limit]) -> str:
    blocks = []
    for lim in limits:
        blocks.append(
            "<threshold>\n"
            f"<id>{lim.custom_id}</id>\n"
            f"<type>{lim.type}</type>\n"
            "<refd>true</refd>\n"
            f"<pos_start>{lim.start:.2f}</pos_start>\n"
            f"<pos_stop>{lim.end:.2f}</pos_stop>\n"
            f"<value>{lim.threshold:.2f}</value>\n"
            f"<tolerance>{lim.tolerance}</tolerance>\n"
            "</threshold>"
        )
    return "\n\n".join(blocks)


def limits_for_channel(limits: Iterable[Limit], channel: str) -> list[Limit]:
    """
    Limits whose custom id falls in the channel's range, highest id first.
    Unknown channels keep every limit.
    """
    bounds = CHANNEL_ID_RANGES.get(str(channel))
    if bounds is None:
        scoped = list(limits)
    else:
        lo, hi = bounds
        scoped = [lim for lim in limits if lo <= lim.custom_id <= hi]
    return sorted(scoped, key=lambda lim: lim.custom_id, reverse=True)


def next_custom_id(limits: Iterable[Limit], floor: int = 100) -> int:
    return max([floor - 1, *(lim.custom_id for lim in limits)]) + 1

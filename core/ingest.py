"""Load per-channel profile files and stitch them into one series with gap markers."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from core.series import Gap, Point, Reading

__all__ = [
    "PROFILE_SUFFIXES",
    "ChannelData",
    "parse_profile",
    "select_recent",
    "stitch",
    "load_channel",
]

LOG = logging.getLogger(__name__)

# tem: temperature profiles, str: strain profiles
PROFILE_SUFFIXES = {
    "tem": "#tem.txt",
    "str": "#str.txt",
}


@dataclass
class ChannelData:
    points: list[Point] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    latest: Optional[str] = None


def _parse_line(line: str) -> Optional[Tuple[float, float]]:
    parts = line.strip().split(",")
    if len(parts) < 2:
        return None
    try:
        distance = float(parts[0])
        value = float(parts[1])
    except ValueError:
        return None
    if math.isnan(distance) or math.isnan(value):
        return None
    return distance, value


def parse_profile(
    path: str | Path,
    *,
    distance_range: Optional[Tuple[float, float]] = None,
    source_id: Optional[str] = None,
) -> list[Reading]:
    """Read ``distance,value`` lines from ``path`` sorted by distance.

    Malformed lines are skipped. ``distance_range`` is inclusive on both ends.
    An unreadable file yields an empty list.
    """
    path = Path(path)
    source = source_id if source_id is not None else path.name
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        LOG.warning("Failed to read profile %s: %s", path, exc)
        return []

    rows: list[Tuple[float, float]] = []
    for line in text.splitlines():
        parsed = _parse_line(line)
        if parsed is None:
            continue
        if distance_range is not None:
            lo, hi = distance_range
            if parsed[0] < lo or parsed[0] > hi:
                continue
        rows.append(parsed)
    rows.sort(key=lambda row: row[0])
    return [Reading(d, v, source) for d, v in rows]


def select_recent(directory: str | Path, suffix: str, limit: int) -> list[Path]:
    """Return the ``limit`` most recently modified ``*suffix`` files, oldest first."""
    if limit <= 0:
        raise ValueError("limit must be positive")
    directory = Path(directory)
    candidates = [p for p in directory.iterdir() if p.is_file() and p.name.endswith(suffix)]
    candidates.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    selected = candidates[:limit]
    selected.reverse()
    return selected


def stitch(profiles: Iterable[Sequence[Reading]]) -> list[Point]:
    """Concatenate profiles, separating consecutive non-empty ones with a ``Gap``.

    The marker carries the last distance and source of the profile before it.
    Empty profiles are skipped, so markers never lead, trail or repeat.
    """
    out: list[Point] = []
    for readings in profiles:
        if not readings:
            continue
        if out:
            last = out[-1]
            out.append(Gap(last.distance, last.source_id))
        out.extend(readings)
    return out


def load_channel(
    root: str | Path,
    channel_dir: str,
    *,
    kind: str = "tem",
    limit: int = 17,
    distance_range: Optional[Tuple[float, float]] = None,
) -> ChannelData:
    """Load the most recent profiles of one channel as a single stitched series."""
    try:
        suffix = PROFILE_SUFFIXES[kind]
    except KeyError:
        raise ValueError(f"Unknown profile kind: {kind!r}") from None
    directory = Path(root) / channel_dir
    if not directory.is_dir():
        raise FileNotFoundError(directory)

    files = select_recent(directory, suffix, limit)
    profiles = [parse_profile(path, distance_range=distance_range) for path in files]
    data = ChannelData(
        points=stitch(profiles),
        sources=[path.name for path, readings in zip(files, profiles) if readings],
        latest=files[-1].name if files else None,
    )
    LOG.info(
        "Loaded %d points from %d/%d %s files in %s",
        len(data.points),
        len(data.sources),
        len(files),
        kind,
        directory,
    )
    return data

"""Largest-Triangle-Three-Buckets downsampling of contiguous line segments."""
from __future__ import annotations

from typing import Sequence

import numpy as np

from core.series import Reading

__all__ = ["lttb_indices", "lttb_segment"]


def _bucket_means(v: np.ndarray, start: np.ndarray, end: np.ndarray) -> np.ndarray:
    """Mean of ``v[start:end]`` per bucket; an empty bucket yields ``v[start]``."""
    n = v.size
    csum = np.concatenate(([0.0], np.cumsum(v)))
    end = np.maximum(end, start)
    counts = end - start
    boundary = v[np.minimum(start, n - 1)]
    sums = csum[np.minimum(end, n)] - csum[np.minimum(start, n)]
    with np.errstate(invalid="ignore", divide="ignore"):
        means = sums / counts
    return np.where(counts > 0, means, boundary)


def lttb_indices(x: np.ndarray, y: np.ndarray, threshold: int) -> np.ndarray:
    """Return the indices LTTB keeps when reducing ``(x, y)`` to ``threshold`` points.

    Parameters
    ----------
    x : np.ndarray
        Distance of each point, ascending.
    y : np.ndarray
        Value of each point; must not contain NaN.
    threshold : int
        Number of points to keep.

    Returns
    -------
    np.ndarray
        Non-decreasing int64 indices, always starting with ``0`` and ending
        with ``n - 1``. A bucket also weighs the first index of the next
        bucket, so on degenerate input a boundary point can be picked twice. When ``threshold`` is below 3 or not smaller
        than ``n`` no reduction is possible and every index is returned.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.shape != y.shape:
        raise ValueError("x and y must have the same length")
    n = x.size
    if threshold < 3 or threshold >= n:
        return np.arange(n, dtype=np.int64)

    every = (n - 2) / (threshold - 2)
    # edges[k] is the first index of bucket k; the first point is bucket -1
    edges = np.floor(np.arange(threshold) * every).astype(np.int64) + 1

    next_start = edges[1 : threshold - 1]
    next_end = np.minimum(edges[2:threshold], n)
    avg_x = _bucket_means(x, next_start, next_end)
    avg_y = _bucket_means(y, next_start, next_end)

    out = np.empty(threshold, dtype=np.int64)
    out[0] = 0
    out[-1] = n - 1
    a = 0
    for i in range(threshold - 2):
        lo = int(edges[i])
        # upper bound inclusive; the last point is reserved
        hi = min(int(edges[i + 1]), n - 2) + 1
        if hi <= lo:
            hi = lo + 1
        ax = x[a]
        ay = y[a]
        # twice the triangle area; only the argmax matters
        areas = np.abs((ax - avg_x[i]) * (y[lo:hi] - ay) - (ax - x[lo:hi]) * (avg_y[i] - ay))
        a = lo + int(np.argmax(areas))
        out[i + 1] = a
    return out


def lttb_segment(points: Sequence[Reading], threshold: int) -> list[Reading]:
    """Reduce one gap-free run of readings to ``threshold`` of its own points.

    First and last readings are kept as-is; interior picks are original
    readings, never interpolated. Runs that cannot be reduced come back whole.
    """
    n = len(points)
    if threshold < 3 or threshold >= n:
        return list(points)
    x = np.fromiter((p.distance for p in points), dtype=np.float64, count=n)
    y = np.fromiter((p.value for p in points), dtype=np.float64, count=n)
    return [points[i] for i in lttb_indices(x, y, threshold)]

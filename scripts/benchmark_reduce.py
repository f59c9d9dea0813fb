#!/usr/bin/env python3
"""Benchmark per-frame latency of the viewport reduction pipeline.

The harness stitches several synthetic fibre profiles (each restarting its own
distance axis) and replays a pan sweep followed by a zoom-in sequence, the way
the chart drives the pipeline during a drag gesture.  Each batch reports the
average and worst frame time together with the peak Python memory observed.
"""

from __future__ import annotations

import argparse
import gc
import math
import statistics
import sys
import time
import tracemalloc
from dataclasses import dataclass

import numpy as np

from core.ingest import stitch
from core.pipeline import reduce_series
from core.series import Point, Reading
from core.view_window import WindowLimits, full_extent, pan_viewport, zoom_viewport
from core.viewport import Viewport

FRAME_BUDGET_MS = 1000.0 / 60.0


@dataclass
class BenchmarkResult:
    files: int
    points_per_file: int
    budget: int
    frame_ms: float
    worst_ms: float
    peak_bytes: int


def _format_bytes(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 B"
    units = ["B", "KiB", "MiB", "GiB"]
    value = float(num_bytes)
    unit = units[0]
    for unit in units[1:]:
        if value < 1024.0:
            break
        value /= 1024.0
    else:
        unit = units[-1]
    return f"{value:.1f} {unit}"


def _build_synthetic_series(files: int, points_per_file: int, length_m: float) -> list[Point]:
    profiles = []
    for idx in range(files):
        rng = np.random.default_rng(idx)
        distance = np.linspace(0.0, length_m, points_per_file)
        temp = 25.0 + 5.0 * np.sin(2 * math.pi * distance / (length_m / 7.0) + idx * 0.3)
        temp += 0.4 * rng.standard_normal(points_per_file)
        source = f"profile_{idx:02d}#tem.txt"
        profiles.append([Reading(float(d), float(v), source) for d, v in zip(distance, temp)])
    return stitch(profiles)


def _frames(extent: Viewport, steps: int) -> list[Viewport]:
    limits = WindowLimits(span_min=1.0, span_max=extent.span)
    frames = []
    view = extent
    delta = extent.span / (steps * 4)
    view = zoom_viewport(view, 0.25, anchor=extent.min, extent=extent, limits=limits)
    for _ in range(steps):
        view = pan_viewport(view, delta, extent=extent, limits=limits)
        frames.append(view)
    for _ in range(steps):
        anchor = (view.min + view.max) / 2.0
        view = zoom_viewport(view, 0.9, anchor=anchor, extent=extent, limits=limits)
        frames.append(view)
    return frames


def _benchmark(series: list[Point], frames: list[Viewport], budget: int) -> tuple[float, float, int]:
    timings: list[float] = []
    gc.collect()
    tracemalloc.start()
    try:
        for view in frames:
            start = time.perf_counter()
            reduce_series(series, view, budget)
            timings.append(time.perf_counter() - start)
    finally:
        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()
    return statistics.mean(timings) * 1000.0, max(timings) * 1000.0, int(peak or current)


def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--files",
        type=int,
        action="append",
        help="Number of stitched profiles (repeatable; default: 1, 5, 17)",
    )
    parser.add_argument("--points", type=int, default=10_000, help="Points per profile")
    parser.add_argument("--length", type=float, default=5_000.0, help="Fibre length in metres")
    parser.add_argument("--budget", type=int, default=4000, help="Point budget per frame")
    parser.add_argument("--steps", type=int, default=30, help="Pan and zoom frames each")
    args = parser.parse_args(argv)

    for file_count in args.files or [1, 5, 17]:
        series = _build_synthetic_series(file_count, args.points, args.length)
        extent = full_extent(series)
        if extent is None:
            continue
        frame_ms, worst_ms, peak = _benchmark(series, _frames(extent, args.steps), args.budget)
        result = BenchmarkResult(
            files=file_count,
            points_per_file=args.points,
            budget=args.budget,
            frame_ms=frame_ms,
            worst_ms=worst_ms,
            peak_bytes=peak,
        )
        print(
            "== Files: {files} (≈{points:,} points, budget {budget}) ==".format(
                files=result.files,
                points=result.files * result.points_per_file,
                budget=result.budget,
            )
        )
        status = "ok" if result.worst_ms <= FRAME_BUDGET_MS else "over frame budget"
        print(
            "reduce: {avg:.2f} ms avg, {worst:.2f} ms worst ({status}) — peak {mem}".format(
                avg=result.frame_ms,
                worst=result.worst_ms,
                status=status,
                mem=_format_bytes(result.peak_bytes),
            )
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

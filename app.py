# app.py
import csv
import logging
import sys

from config import CHART_PRESETS, ViewerConfig
from core.ingest import load_channel
from core.series import is_gap
from core.view_window import full_extent
from core.viewport import Viewport


def _write_csv(points, fh):
    writer = csv.writer(fh)
    writer.writerow(["distance", "value", "source"])
    for p in points:
        value = "" if is_gap(p) else p.value
        writer.writerow([p.distance, value, p.source_id or ""])


def main(
    channel,
    *,
    chart: str | None = None,
    kind: str | None = None,
    view_min: float | None = None,
    view_max: float | None = None,
    budget: int | None = None,
    config_path: str | None = None,
    output: str | None = None,
) -> int:
    cfg = ViewerConfig.load(config_path)
    if budget is not None and budget > 0:
        cfg.max_points = budget

    folder = cfg.channel_dirs.get(str(channel))
    if folder is None:
        print(f"Unknown channel {channel!r}; known: {', '.join(cfg.channel_dirs)}", file=sys.stderr)
        return 2

    preset = None
    if chart is not None:
        preset = CHART_PRESETS.get(chart)
        if preset is None:
            print(f"Unknown chart {chart!r}; known: {', '.join(CHART_PRESETS)}", file=sys.stderr)
            return 2

    data = load_channel(
        cfg.data_root,
        folder,
        kind=kind or (preset.kind if preset else "tem"),
        limit=cfg.files_per_channel,
        distance_range=preset.distance_range if preset else None,
    )

    # a missing bound comes from the preset, else from the loaded data
    if preset is not None:
        base = Viewport(preset.x_min, preset.x_max)
    else:
        base = full_extent(data.points)
    if base is None and (view_min is None or view_max is None):
        viewport = None
    else:
        viewport = Viewport(
            view_min if view_min is not None else base.min,
            view_max if view_max is not None else base.max,
        )
    points = cfg.reduce_settings().reduce(data.points, viewport) if viewport else []

    if output:
        with open(output, "w", newline="") as fh:
            _write_csv(points, fh)
    else:
        _write_csv(points, sys.stdout)
    return 0


if __name__ == "__main__":
    import argparse
    p = argparse.ArgumentParser()
    p.add_argument("channel")
    p.add_argument("--chart", choices=tuple(CHART_PRESETS))
    p.add_argument("--type", dest="kind", choices=("tem", "str"))
    p.add_argument("--min", dest="view_min", type=float)
    p.add_argument("--max", dest="view_max", type=float)
    p.add_argument("--budget", type=int)
    p.add_argument("--config")
    p.add_argument("--output")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    sys.exit(
        main(
            args.channel,
            chart=args.chart,
            kind=args.kind,
            view_min=args.view_min,
            view_max=args.view_max,
            budget=args.budget,
            config_path=args.config,
            output=args.output,
        )
    )

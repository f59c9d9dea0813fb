from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from core.pipeline import DEFAULT_MAX_POINTS, ReduceSettings
from core.view_window import WindowLimits
from core.viewport import DEFAULT_BUFFER_CAP, DEFAULT_BUFFER_FRACTION

DEFAULT_CHANNEL_DIRS = {
    "1": "Fibra_Espesador_ch1",
    "2": "Fibra_Espesador_ch2",
    "3": "Fibra_Espesador_ch3",
}


@dataclass(frozen=True)
class ChartPreset:
    kind: str
    x_min: float
    x_max: float

    @property
    def distance_range(self) -> tuple[float, float]:
        return (self.x_min, self.x_max)


# chart name -> profile kind and the distance range it is loaded and opened on
CHART_PRESETS = {
    "tension": ChartPreset(kind="str", x_min=0.0, x_max=810.0),
    "temperatura": ChartPreset(kind="tem", x_min=800.0, x_max=1620.0),
}


def _parse_channels(raw: str) -> dict[str, str]:
    channels: dict[str, str] = {}
    for part in raw.split(","):
        part = part.strip()
        if not part or ":" not in part:
            continue
        key, folder = (item.strip() for item in part.split(":", 1))
        if key and folder:
            channels[key] = folder
    return channels


@dataclass
class ViewerConfig:
    max_points: int = DEFAULT_MAX_POINTS
    buffer_fraction: float = DEFAULT_BUFFER_FRACTION
    buffer_cap: float = DEFAULT_BUFFER_CAP
    data_root: Path = Path("data")
    files_per_channel: int = 17
    channel_dirs: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CHANNEL_DIRS))
    span_min: float = 1.0
    span_max: float = 100_000.0
    ini_path: Path | None = None

    @classmethod
    def load(cls, ini_path: str | Path | None = None) -> "ViewerConfig":
        cfg = cls()
        path = Path(ini_path or "config.ini")
        if path.exists():
            import configparser

            parser = configparser.ConfigParser()
            parser.read(path)
            render = parser["render"] if "render" in parser else None
            if render:
                try:
                    max_points = render.getint("max_points", fallback=cfg.max_points)
                except ValueError:
                    max_points = cfg.max_points
                if max_points >= 1:
                    cfg.max_points = max_points
                try:
                    fraction = render.getfloat("buffer_fraction", fallback=cfg.buffer_fraction)
                    cap = render.getfloat("buffer_cap", fallback=cfg.buffer_cap)
                except ValueError:
                    fraction, cap = cfg.buffer_fraction, cfg.buffer_cap
                if fraction >= 0:
                    cfg.buffer_fraction = fraction
                if cap >= 0:
                    cfg.buffer_cap = cap

            data = parser["data"] if "data" in parser else None
            if data:
                root = data.get("root", fallback="").strip()
                if root:
                    cfg.data_root = Path(root)
                try:
                    files = data.getint("files_per_channel", fallback=cfg.files_per_channel)
                except ValueError:
                    files = cfg.files_per_channel
                if files > 0:
                    cfg.files_per_channel = files
                channels = _parse_channels(data.get("channels", fallback=""))
                if channels:
                    cfg.channel_dirs = channels

            view = parser["view"] if "view" in parser else None
            if view:
                try:
                    span_min = view.getfloat("span_min", fallback=cfg.span_min)
                    span_max = view.getfloat("span_max", fallback=cfg.span_max)
                except ValueError:
                    span_min, span_max = cfg.span_min, cfg.span_max
                if 0 < span_min <= span_max:
                    cfg.span_min = span_min
                    cfg.span_max = span_max
        cfg.ini_path = path
        return cfg

    def reduce_settings(self) -> ReduceSettings:
        return ReduceSettings(
            budget=self.max_points,
            buffer_fraction=self.buffer_fraction,
            buffer_cap=self.buffer_cap,
        )

    def window_limits(self) -> WindowLimits:
        return WindowLimits(span_min=self.span_min, span_max=self.span_max)

    def save(self) -> None:
        if self.ini_path is None:
            return
        import configparser

        parser = configparser.ConfigParser()
        parser["render"] = {
            "max_points": str(self.max_points),
            "buffer_fraction": f"{self.buffer_fraction:.3f}",
            "buffer_cap": f"{self.buffer_cap:.3f}",
        }
        parser["data"] = {
            "root": str(self.data_root),
            "files_per_channel": str(self.files_per_channel),
            "channels": ",".join(f"{key}:{folder}" for key, folder in self.channel_dirs.items()),
        }
        parser["view"] = {
            "span_min": f"{self.span_min:.3f}",
            "span_max": f"{self.span_max:.3f}",
        }
        with self.ini_path.open("w") as fh:
            parser.write(fh)

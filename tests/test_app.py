import csv
import io
import math
from pathlib import Path

import app
from core.series import Gap, Reading


def _setup(tmp_path: Path) -> Path:
    channel = tmp_path / "data" / "north"
    channel.mkdir(parents=True)
    (channel / "a#tem.txt").write_text("\n".join(f"{d},{20 + d % 7}" for d in range(0, 500)))
    (channel / "b#tem.txt").write_text("\n".join(f"{d},{30 + d % 3}" for d in range(0, 500)))
    ini_path = tmp_path / "config.ini"
    ini_path.write_text(
        f"""
[data]
root = {tmp_path / "data"}
channels = 1:north
""".strip()
    )
    return ini_path


def _read(path: Path) -> list[dict[str, str]]:
    with path.open(newline="") as fh:
        return list(csv.DictReader(fh))


def test_main_writes_reduced_csv(tmp_path: Path):
    ini_path = _setup(tmp_path)
    out_path = tmp_path / "out.csv"
    rc = app.main("1", budget=100, config_path=str(ini_path), output=str(out_path))
    assert rc == 0
    rows = _read(out_path)
    gaps = [row for row in rows if row["value"] == ""]
    assert len(gaps) == 1
    assert len(rows) - len(gaps) == 100
    assert {row["source"] for row in rows} == {"a#tem.txt", "b#tem.txt"}


def test_main_viewport_limits_rows(tmp_path: Path):
    ini_path = _setup(tmp_path)
    out_path = tmp_path / "out.csv"
    rc = app.main(
        "1", view_min=100.0, view_max=200.0, config_path=str(ini_path), output=str(out_path)
    )
    assert rc == 0
    rows = _read(out_path)
    readings = [row for row in rows if row["value"] != ""]
    assert all(90.0 <= float(row["distance"]) <= 210.0 for row in readings)
    assert len(readings) == 2 * 121


def test_main_unknown_channel(tmp_path: Path):
    ini_path = _setup(tmp_path)
    assert app.main("7", config_path=str(ini_path)) == 2
    assert app.main("1", chart="pressure", config_path=str(ini_path)) == 2


def test_main_chart_preset_limits_loaded_range(tmp_path: Path):
    ini_path = _setup(tmp_path)
    channel = tmp_path / "data" / "north"
    (channel / "s#str.txt").write_text("\n".join(f"{d},{d % 11}" for d in range(0, 1010, 10)))
    (channel / "t#tem.txt").write_text("\n".join(f"{d},{d % 13}" for d in range(700, 1710, 10)))

    out_path = tmp_path / "tension.csv"
    assert app.main("1", chart="tension", config_path=str(ini_path), output=str(out_path)) == 0
    rows = _read(out_path)
    assert {row["source"] for row in rows} == {"s#str.txt"}
    distances = [float(row["distance"]) for row in rows]
    assert min(distances) == 0.0
    assert max(distances) == 810.0
    assert len(rows) == 82

    out_path = tmp_path / "temperatura.csv"
    assert app.main("1", chart="temperatura", config_path=str(ini_path), output=str(out_path)) == 0
    rows = _read(out_path)
    assert {row["source"] for row in rows} == {"t#tem.txt"}
    distances = [float(row["distance"]) for row in rows]
    assert min(distances) == 800.0
    assert max(distances) == 1620.0


def test_main_single_bound_uses_data_extent(tmp_path: Path):
    ini_path = _setup(tmp_path)
    out_path = tmp_path / "out.csv"
    assert app.main("1", view_min=400.0, config_path=str(ini_path), output=str(out_path)) == 0
    readings = [row for row in _read(out_path) if row["value"] != ""]
    distances = [float(row["distance"]) for row in readings]
    assert min(distances) == 391.0
    assert max(distances) == 499.0
    assert len(readings) == 2 * 109


def test_write_csv_blanks_every_gap():
    buf = io.StringIO()
    app._write_csv(
        [Reading(1.0, 2.5, "a"), Reading(2.0, math.nan, "a"), Gap(2.0, "a"), Reading(0.0, None, "b")],
        buf,
    )
    rows = list(csv.DictReader(io.StringIO(buf.getvalue())))
    assert [row["value"] for row in rows] == ["2.5", "", "", ""]
    assert [row["source"] for row in rows] == ["a", "a", "a", "b"]

import os
from pathlib import Path

import pytest

from core.ingest import ChannelData, load_channel, parse_profile, select_recent, stitch
from core.series import Gap, Reading


def _write(path: Path, text: str, mtime: float | None = None) -> Path:
    path.write_text(text)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def test_parse_profile_skips_malformed_and_sorts(tmp_path: Path):
    path = _write(
        tmp_path / "2024-01-01#tem.txt",
        "\n".join(
            [
                "2.0,21.5",
                "header,line",
                "1.0,20.0",
                "3.0",
                "",
                "0.5,19.0,extra",
                "4.0,NaN",
            ]
        ),
    )
    readings = parse_profile(path)
    assert [(r.distance, r.value) for r in readings] == [(0.5, 19.0), (1.0, 20.0), (2.0, 21.5)]
    assert {r.source_id for r in readings} == {"2024-01-01#tem.txt"}


def test_parse_profile_distance_range(tmp_path: Path):
    path = _write(tmp_path / "a#tem.txt", "0,1\n10,2\n20,3\n30,4\n")
    readings = parse_profile(path, distance_range=(10.0, 20.0), source_id="custom")
    assert [r.distance for r in readings] == [10.0, 20.0]
    assert readings[0].source_id == "custom"


def test_parse_profile_missing_file(tmp_path: Path):
    assert parse_profile(tmp_path / "missing#tem.txt") == []


def test_select_recent_returns_oldest_first(tmp_path: Path):
    for idx, name in enumerate(["c#tem.txt", "a#tem.txt", "b#tem.txt", "d#tem.txt"]):
        _write(tmp_path / name, "0,1\n", mtime=1_700_000_000 + idx * 60)
    _write(tmp_path / "x#str.txt", "0,1\n", mtime=1_800_000_000)
    selected = select_recent(tmp_path, "#tem.txt", 3)
    assert [p.name for p in selected] == ["a#tem.txt", "b#tem.txt", "d#tem.txt"]


def test_select_recent_limit_must_be_positive(tmp_path: Path):
    with pytest.raises(ValueError):
        select_recent(tmp_path, "#tem.txt", 0)


def test_stitch_inserts_markers_between_nonempty_profiles():
    a = [Reading(0.0, 1.0, "a"), Reading(5.0, 2.0, "a")]
    b = [Reading(0.0, 3.0, "b")]
    c = [Reading(1.0, 4.0, "c")]
    out = stitch([[], a, [], b, c, []])
    assert out == [a[0], a[1], Gap(5.0, "a"), b[0], Gap(0.0, "b"), c[0]]
    assert stitch([]) == []
    assert stitch([[], []]) == []


def test_load_channel(tmp_path: Path):
    channel = tmp_path / "ch1"
    channel.mkdir()
    _write(channel / "old#tem.txt", "0,10\n1,11\n", mtime=1_700_000_000)
    _write(channel / "empty#tem.txt", "bad\n", mtime=1_700_000_060)
    _write(channel / "new#tem.txt", "1,21\n0,20\n", mtime=1_700_000_120)
    _write(channel / "new#str.txt", "0,99\n", mtime=1_700_000_180)

    data = load_channel(tmp_path, "ch1", kind="tem", limit=5)
    assert isinstance(data, ChannelData)
    assert data.sources == ["old#tem.txt", "new#tem.txt"]
    assert data.latest == "new#tem.txt"
    assert [p.distance for p in data.points] == [0.0, 1.0, 1.0, 0.0, 1.0]
    assert isinstance(data.points[2], Gap)

    strain = load_channel(tmp_path, "ch1", kind="str")
    assert [(p.distance, p.value) for p in strain.points] == [(0.0, 99.0)]


def test_load_channel_errors(tmp_path: Path):
    with pytest.raises(ValueError):
        load_channel(tmp_path, "ch1", kind="pressure")
    with pytest.raises(FileNotFoundError):
        load_channel(tmp_path, "missing")

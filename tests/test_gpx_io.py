"""Tests for GPX parsing and writing."""

from __future__ import annotations

from pathlib import Path

import pytest

from track_deviation.errors import (
    InputNotAFileError,
    InputNotFoundError,
    MalformedTrackFileError,
)
from track_deviation.gpx_io import (
    export_path_for,
    read_track_file,
    validate_input_path,
    write_track_file,
)
from track_deviation.models import GeoPoint, Track, TrackFile, TrackSegment


GPX_11 = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="unit" xmlns="http://www.topografix.com/GPX/1/1">
  <metadata><name>Morning loop</name></metadata>
  <wpt lat="51.0" lon="-3.0"><name>Start</name></wpt>
  <trk>
    <name> Lap one </name>
    <desc>Test lap</desc>
    <type>running</type>
    <trkseg>
      <trkpt lat="51.0" lon="-3.0"><ele>12.0</ele><time>2024-01-01T00:00:00Z</time></trkpt>
      <trkpt lat="51.001" lon="-3.0"/>
    </trkseg>
    <trkseg>
      <trkpt lat="51.002" lon="-3.001"/>
    </trkseg>
  </trk>
  <trk><trkseg><trkpt lat="52" lon="-4"/></trkseg></trk>
</gpx>
"""

GPX_10 = """<?xml version="1.0"?>
<gpx version="1.0" creator="legacy" xmlns="http://www.topografix.com/GPX/1/0">
  <name>Old format</name>
  <trk><trkseg><trkpt lat="10.5" lon="20.25"/></trkseg></trk>
</gpx>
"""


def test_read_gpx_11(write_gpx) -> None:
    parsed = read_track_file(write_gpx("lap.gpx", GPX_11))

    assert parsed.name == "Morning loop"
    assert parsed.creator == "unit"
    assert parsed.waypoints == [GeoPoint(51.0, -3.0)]
    assert len(parsed.tracks) == 2
    first = parsed.tracks[0]
    assert first.name == "Lap one"
    assert first.description == "Test lap"
    assert first.track_type == "running"
    assert [len(seg.points) for seg in first.segments] == [2, 1]
    assert first.segments[1].points[0] == GeoPoint(51.002, -3.001)
    assert parsed.tracks[1].name is None
    assert parsed.tracks[1].display_name == "-- Unnamed --"


def test_read_gpx_10_without_metadata(write_gpx) -> None:
    parsed = read_track_file(write_gpx("old.gpx", GPX_10))

    assert parsed.name == "Old format"
    assert parsed.tracks[0].segments[0].points == [GeoPoint(10.5, 20.25)]


def test_read_gpx_without_namespace(write_gpx) -> None:
    content = '<gpx><wpt lat="1" lon="2"/><wpt lat="3" lon="4"/></gpx>'

    parsed = read_track_file(write_gpx("plain.gpx", content))

    assert parsed.tracks == []
    assert parsed.waypoints == [GeoPoint(1.0, 2.0), GeoPoint(3.0, 4.0)]


@pytest.mark.parametrize(
    "content",
    [
        "this is not xml",
        "<gpx><trk><trkseg></trk></gpx>",
        "<kml><Document/></kml>",
        '<gpx><trk><trkseg><trkpt lat="abc" lon="1"/></trkseg></trk></gpx>',
        '<gpx><trk><trkseg><trkpt lat="1"/></trkseg></trk></gpx>',
        '<gpx><wpt lat="nan" lon="1"/></gpx>',
        '<gpx><trk><trkseg><trkpt lat="95" lon="0"/></trkseg></trk></gpx>',
        '<gpx><wpt lat="10" lon="200"/></gpx>',
        '<gpx><wpt lat="-90.5" lon="-180"/></gpx>',
    ],
)
def test_malformed_files_raise(write_gpx, content: str) -> None:
    with pytest.raises(MalformedTrackFileError):
        read_track_file(write_gpx("bad.gpx", content))


def test_boundary_coordinates_are_accepted(write_gpx) -> None:
    content = '<gpx><wpt lat="90" lon="180"/><wpt lat="-90" lon="-180"/></gpx>'

    parsed = read_track_file(write_gpx("edges.gpx", content))

    assert parsed.waypoints == [GeoPoint(90.0, 180.0), GeoPoint(-90.0, -180.0)]


def test_entity_expansion_is_refused(write_gpx) -> None:
    content = (
        '<?xml version="1.0"?>\n'
        '<!DOCTYPE gpx [<!ENTITY a "aaaaaaaaaa"><!ENTITY b "&a;&a;&a;&a;">]>\n'
        "<gpx><metadata><name>&b;</name></metadata></gpx>"
    )

    with pytest.raises(MalformedTrackFileError):
        read_track_file(write_gpx("bomb.gpx", content))


def test_write_then_read_preserves_structure(tmp_path: Path) -> None:
    original = TrackFile(
        name="Export",
        waypoints=[GeoPoint(1.5, 2.5)],
        tracks=[
            Track(
                name="Simplified",
                description="desc",
                track_type="cycling",
                segments=[
                    TrackSegment(points=[GeoPoint(51.123456789, -3.987654321)]),
                    TrackSegment(points=[GeoPoint(51.2, -3.9), GeoPoint(51.3, -3.8)]),
                ],
            )
        ],
    )

    path = write_track_file(original, tmp_path / "out.gpx")
    restored = read_track_file(path)

    assert restored.name == "Export"
    assert restored.creator == "track_deviation"
    assert restored.waypoints == original.waypoints
    assert restored.tracks == original.tracks
    text = path.read_text(encoding="utf-8")
    assert 'xmlns="http://www.topografix.com/GPX/1/1"' in text


def test_validate_input_path(tmp_path: Path) -> None:
    existing = tmp_path / "ok.gpx"
    existing.write_text("<gpx/>", encoding="utf-8")

    assert validate_input_path(existing, "track") == existing
    with pytest.raises(InputNotFoundError, match="does not exist"):
        validate_input_path(tmp_path / "missing.gpx", "reference")
    with pytest.raises(InputNotAFileError, match="is not a file"):
        validate_input_path(tmp_path, "track")


def test_export_path_is_a_sibling() -> None:
    assert export_path_for(Path("rides") / "tuesday.gpx") == Path("rides") / (
        "tuesday.modified.gpx"
    )
    assert export_path_for("track") == Path("track.modified.gpx")

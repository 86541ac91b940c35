"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable track builders and GPX
writers shared by the geometry, I/O and CLI tests.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from track_deviation.models import GeoPoint, Track, TrackSegment

LatLon = Tuple[float, float]

GPX_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">\n'
)


# --- Factory helpers -------------------------------------------------
def make_track(*segments: Sequence[LatLon], name: Optional[str] = None) -> Track:
    return Track(
        name=name,
        segments=[
            TrackSegment(points=[GeoPoint(lat, lon) for lat, lon in segment])
            for segment in segments
        ],
    )


def meridian_line(
    count: int, *, lat0: float = 51.48, lon: float = -3.18, step: float = 0.0001
) -> list[LatLon]:
    """Return ``count`` points heading north along a meridian."""

    return [(lat0 + i * step, lon) for i in range(count)]


def gpx_track(points: Iterable[LatLon], name: Optional[str] = None) -> str:
    name_xml = f"<name>{name}</name>" if name else ""
    pts = "".join(f'<trkpt lat="{lat}" lon="{lon}"/>' for lat, lon in points)
    return f"<trk>{name_xml}<trkseg>{pts}</trkseg></trk>"


def gpx_document(*bodies: str) -> str:
    return GPX_HEADER + "".join(bodies) + "\n</gpx>\n"


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def write_gpx(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(filename: str, content: str) -> Path:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def reference_points() -> list[LatLon]:
    return meridian_line(11)


@pytest.fixture
def build_track() -> Callable[..., Track]:
    return make_track


@pytest.fixture
def build_gpx() -> Callable[..., str]:
    """Return a builder taking track point lists (or raw XML strings)."""

    def _build(*tracks, names: Sequence[Optional[str]] = ()) -> str:
        bodies = []
        for idx, track in enumerate(tracks):
            if isinstance(track, str):
                bodies.append(track)
                continue
            name = names[idx] if idx < len(names) else None
            bodies.append(gpx_track(track, name))
        return gpx_document(*bodies)

    return _build

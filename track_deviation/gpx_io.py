"""Read and write GPX documents as :class:`TrackFile` values.

Parsing goes through ``defusedxml`` so untrusted files cannot trigger entity
expansion attacks. Only latitude/longitude are kept; elevation and time are
dropped on read and never written.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Union
from xml.etree import ElementTree as ET

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DefusedET

from .config import EXPORT_SUFFIX, GPX_CREATOR
from .errors import (
    InputNotAFileError,
    InputNotFoundError,
    MalformedTrackFileError,
)
from .models import GeoPoint, Track, TrackFile, TrackSegment

PathLike = Union[str, Path]

GPX_NS = "http://www.topografix.com/GPX/1/1"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
ET.register_namespace("", GPX_NS)
ET.register_namespace("xsi", XSI_NS)

LOGGER = logging.getLogger(__name__)


def validate_input_path(path: PathLike, role: str = "input") -> Path:
    """Ensure ``path`` exists and is a regular file.

    Raises:
        InputNotFoundError: If nothing exists at ``path``.
        InputNotAFileError: If ``path`` is a directory or other non-file.
    """

    resolved = Path(path)
    if not resolved.exists():
        raise InputNotFoundError(f"The {role} path {str(resolved)!r} does not exist")
    if not resolved.is_file():
        raise InputNotAFileError(f"The {role} path {str(resolved)!r} is not a file")
    return resolved


def read_track_file(path: PathLike) -> TrackFile:
    """Parse a GPX file into tracks and free-standing waypoints.

    Raises:
        MalformedTrackFileError: If the file is not well-formed GPX or a point
            lacks numeric, in-range coordinates.
        OSError: If the file cannot be opened.
    """

    source = Path(path)
    try:
        tree = DefusedET.parse(source)
    except (ET.ParseError, DefusedXmlException) as exc:
        raise MalformedTrackFileError(
            f"Failed to read {str(source)!r} as GPX: {exc}"
        ) from exc

    root = tree.getroot()
    if _local(root.tag) != "gpx":
        raise MalformedTrackFileError(
            f"{str(source)!r} is not a GPX document (root element "
            f"<{_local(root.tag)}>)"
        )

    track_file = TrackFile(creator=root.get("creator"))
    for child in root:
        tag = _local(child.tag)
        if tag == "metadata":
            track_file.name = _child_text(child, "name")
        elif tag == "name" and track_file.name is None:
            # GPX 1.0 keeps the document name at the top level.
            track_file.name = _text(child)
        elif tag == "wpt":
            track_file.waypoints.append(_parse_point(child, source))
        elif tag == "trk":
            track_file.tracks.append(_parse_track(child, source))

    LOGGER.debug(
        "Parsed %s: %d track(s), %d waypoint(s)",
        source,
        len(track_file.tracks),
        len(track_file.waypoints),
    )
    return track_file


def write_track_file(track_file: TrackFile, path: PathLike) -> Path:
    """Serialise ``track_file`` as GPX 1.1 to ``path``."""

    destination = Path(path)
    root = ET.Element(
        _qualified("gpx"),
        {
            "version": "1.1",
            "creator": track_file.creator or GPX_CREATOR,
            f"{{{XSI_NS}}}schemaLocation": (
                f"{GPX_NS} http://www.topografix.com/GPX/1/1/gpx.xsd"
            ),
        },
    )
    if track_file.name:
        metadata = ET.SubElement(root, _qualified("metadata"))
        _append_text(metadata, "name", track_file.name)

    for waypoint in track_file.waypoints:
        _append_point(root, "wpt", waypoint)

    for track in track_file.tracks:
        trk = ET.SubElement(root, _qualified("trk"))
        _append_text(trk, "name", track.name)
        _append_text(trk, "desc", track.description)
        _append_text(trk, "type", track.track_type)
        for segment in track.segments:
            trkseg = ET.SubElement(trk, _qualified("trkseg"))
            for point in segment.points:
                _append_point(trkseg, "trkpt", point)

    tree = ET.ElementTree(root)
    ET.indent(tree)
    tree.write(destination, encoding="utf-8", xml_declaration=True)
    return destination


def export_path_for(path: PathLike) -> Path:
    """Return the sibling path used for a simplified export of ``path``."""

    return Path(path).with_suffix(EXPORT_SUFFIX)


def _parse_track(element: ET.Element, source: Path) -> Track:
    track = Track(
        name=_child_text(element, "name"),
        description=_child_text(element, "desc"),
        track_type=_child_text(element, "type"),
    )
    for child in element:
        if _local(child.tag) != "trkseg":
            continue
        points = [
            _parse_point(node, source) for node in child if _local(node.tag) == "trkpt"
        ]
        track.segments.append(TrackSegment(points=points))
    return track


def _parse_point(element: ET.Element, source: Path) -> GeoPoint:
    lat_raw = element.get("lat")
    lon_raw = element.get("lon")
    if lat_raw is None or lon_raw is None:
        raise MalformedTrackFileError(
            f"{str(source)!r} contains a <{_local(element.tag)}> without lat/lon"
        )
    try:
        lat = float(lat_raw)
        lon = float(lon_raw)
    except ValueError as exc:
        raise MalformedTrackFileError(
            f"{str(source)!r} contains a non-numeric coordinate "
            f"(lat={lat_raw!r}, lon={lon_raw!r})"
        ) from exc
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise MalformedTrackFileError(
            f"{str(source)!r} contains a non-finite coordinate "
            f"(lat={lat_raw!r}, lon={lon_raw!r})"
        )
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise MalformedTrackFileError(
            f"{str(source)!r} contains an out-of-range coordinate "
            f"(lat={lat_raw!r}, lon={lon_raw!r})"
        )
    return GeoPoint(lat=lat, lon=lon)


def _append_point(parent: ET.Element, tag: str, point: GeoPoint) -> None:
    ET.SubElement(
        parent,
        _qualified(tag),
        {"lat": repr(float(point.lat)), "lon": repr(float(point.lon))},
    )


def _append_text(parent: ET.Element, tag: str, value: Optional[str]) -> None:
    if value is None:
        return
    node = ET.SubElement(parent, _qualified(tag))
    node.text = value


def _child_text(element: ET.Element, tag: str) -> Optional[str]:
    for child in element:
        if _local(child.tag) == tag:
            return _text(child)
    return None


def _text(element: ET.Element) -> Optional[str]:
    if element.text is None:
        return None
    value = element.text.strip()
    return value or None


def _local(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an element tag."""

    return tag.rsplit("}", 1)[-1]


def _qualified(tag: str) -> str:
    return f"{{{GPX_NS}}}{tag}"


__all__ = [
    "export_path_for",
    "read_track_file",
    "validate_input_path",
    "write_track_file",
]

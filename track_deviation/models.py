"""Dataclasses describing GPS track inputs and comparison results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .config import UNNAMED_TRACK_NAME


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A single latitude/longitude sample in degrees."""

    lat: float
    lon: float


@dataclass(slots=True)
class TrackSegment:
    """One continuous recording; point order is significant."""

    points: List[GeoPoint] = field(default_factory=list)


@dataclass(slots=True)
class Track:
    """Optionally named recording composed of ordered segments."""

    name: Optional[str] = None
    segments: List[TrackSegment] = field(default_factory=list)
    description: Optional[str] = None
    track_type: Optional[str] = None

    @classmethod
    def from_waypoints(
        cls, waypoints: Iterable[GeoPoint], name: Optional[str] = None
    ) -> "Track":
        """Build a single-segment track from free-standing waypoints, in order."""

        return cls(name=name, segments=[TrackSegment(points=list(waypoints))])

    def iter_points(self) -> Iterator[GeoPoint]:
        """Yield every point of every segment in recording order."""

        for segment in self.segments:
            yield from segment.points

    @property
    def point_count(self) -> int:
        return sum(len(segment.points) for segment in self.segments)

    @property
    def display_name(self) -> str:
        return self.name or UNNAMED_TRACK_NAME


@dataclass(slots=True)
class TrackFile:
    """Parsed contents of a single GPX document."""

    tracks: List[Track] = field(default_factory=list)
    waypoints: List[GeoPoint] = field(default_factory=list)
    name: Optional[str] = None
    creator: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Deviation metrics for one candidate track against the reference.

    Distances and lengths are in metres. ``track_index`` is 1-based across all
    candidate files in input order.
    """

    track_index: int
    track_name: str
    current_track_length_m: float
    reference_track_length_m: float
    average_distance_m: float
    simplified_average_distance_m: float
    frechet_distance_m: float
    hausdorff_distance_m: float

    def to_dict(self) -> Dict[str, Any]:
        """Return the external record representation."""

        return {
            "track_index": self.track_index,
            "track_name": self.track_name,
            "current_track_length_m": self.current_track_length_m,
            "reference_track_length_m": self.reference_track_length_m,
            "average_distance_m": self.average_distance_m,
            "simplified_average_distance_m": self.simplified_average_distance_m,
            "frechet_distance_m": self.frechet_distance_m,
            "hausdorff_distance_m": self.hausdorff_distance_m,
        }


__all__ = [
    "ComparisonResult",
    "GeoPoint",
    "Track",
    "TrackFile",
    "TrackSegment",
]

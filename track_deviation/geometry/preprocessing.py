"""Preprocessing utilities turning tracks into planar polylines."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
from numpy.typing import NDArray
from pyproj import Geod
from shapely.geometry import LineString

from ..models import GeoPoint, Track
from .nearest import as_metric_array
from .projection import FlatProjection

MetricArray = NDArray[np.float64]

_GEOD = Geod(ellps="WGS84")


def join_track(track: Track, projection: FlatProjection) -> MetricArray:
    """Project every segment of ``track`` and concatenate them in order.

    Segment boundaries become ordinary edges; nothing is deduplicated,
    reordered or inserted.
    """

    return projection.project_points(list(track.iter_points()))


def simplify_points(
    points: Iterable[Sequence[float]], tolerance_m: float
) -> MetricArray:
    """Reduce a planar polyline with Ramer-Douglas-Peucker.

    Delegates to shapely's Douglas-Peucker simplifier. A vertex survives when
    its distance to the chord of the span being examined exceeds
    ``tolerance_m``. The first and last vertices are always kept and the
    output is an ordered subset of the input.
    """

    if tolerance_m < 0:
        raise ValueError("tolerance_m must be non-negative")
    array = as_metric_array(points)
    if len(array) < 3:
        return array.copy()

    line = LineString(array)
    simplified = line.simplify(tolerance_m, preserve_topology=False)
    return as_metric_array(simplified.coords)


def track_length_m(points: Sequence[GeoPoint]) -> float:
    """Return the WGS84 geodesic length of a geodetic point sequence in metres."""

    if len(points) < 2:
        return 0.0
    lons = [pt.lon for pt in points]
    lats = [pt.lat for pt in points]
    return float(_GEOD.line_length(lons, lats))


def polyline_length(points: Iterable[Sequence[float]]) -> float:
    """Return the planar length of a polyline in its own units."""

    array = as_metric_array(points)
    if len(array) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(array, axis=0), axis=1)))


__all__ = [
    "join_track",
    "polyline_length",
    "simplify_points",
    "track_length_m",
]

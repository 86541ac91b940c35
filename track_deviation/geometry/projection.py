"""Local flat projection between geodetic degrees and planar metres."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable, List, Sequence

import numpy as np
from numpy.typing import NDArray

from ..config import PROJECTION_MAX_RADIUS_M
from ..models import GeoPoint

MetricArray = NDArray[np.float64]
PlanarPoint = NDArray[np.float64]


def centroid(points: Iterable[GeoPoint]) -> GeoPoint:
    """Return the arithmetic mean latitude/longitude of ``points``."""

    collected = list(points)
    if not collected:
        raise ValueError("Cannot compute the centroid of an empty point collection")
    lats = np.asarray([pt.lat for pt in collected], dtype=float)
    lons = np.asarray([pt.lon for pt in collected], dtype=float)
    return GeoPoint(lat=float(np.mean(lats)), lon=float(np.mean(lons)))


@dataclass(frozen=True, slots=True)
class FlatProjection:
    """Equirectangular-style projection anchored at a single geodetic point.

    ``kx`` and ``ky`` are metres per degree of longitude and latitude at the
    anchor latitude on the WGS84 ellipsoid (cheap-ruler approximation).
    Distances stay accurate within ``PROJECTION_MAX_RADIUS_M`` of the anchor.
    Planar coordinates from two different instances must never be mixed.
    """

    anchor: GeoPoint
    kx: float
    ky: float

    @classmethod
    def at(cls, anchor: GeoPoint) -> "FlatProjection":
        """Build the projection for ``anchor``."""

        if not (math.isfinite(anchor.lat) and math.isfinite(anchor.lon)):
            raise ValueError("Projection anchor must have finite coordinates")
        if abs(anchor.lat) >= 90.0:
            raise ValueError("Flat projection is undefined at the poles")
        cos1 = math.cos(math.radians(anchor.lat))
        cos2 = 2.0 * cos1 * cos1 - 1.0
        cos3 = 2.0 * cos1 * cos2 - cos1
        cos4 = 2.0 * cos1 * cos3 - cos2
        cos5 = 2.0 * cos1 * cos4 - cos3
        kx = 1000.0 * (111.41513 * cos1 - 0.09455 * cos3 + 0.00012 * cos5)
        ky = 1000.0 * (111.13209 - 0.56605 * cos2 + 0.0012 * cos4)
        return cls(anchor=anchor, kx=kx, ky=ky)

    @classmethod
    def centred_on(cls, points: Iterable[GeoPoint]) -> "FlatProjection":
        """Build the projection anchored at the centroid of ``points``."""

        return cls.at(centroid(points))

    def project(self, point: GeoPoint) -> PlanarPoint:
        """Return planar ``(x, y)`` metres for a geodetic point."""

        dx = _wrap_degrees(point.lon - self.anchor.lon)
        dy = point.lat - self.anchor.lat
        return np.array([dx * self.kx, dy * self.ky], dtype=float)

    def unproject(self, point: Sequence[float]) -> GeoPoint:
        """Return the geodetic point for planar ``(x, y)`` metres."""

        x, y = float(point[0]), float(point[1])
        lon = _normalize_longitude(self.anchor.lon + x / self.kx)
        return GeoPoint(lat=self.anchor.lat + y / self.ky, lon=lon)

    def project_points(self, points: Sequence[GeoPoint]) -> MetricArray:
        """Project a sequence of geodetic points into an ``(n, 2)`` array."""

        if not points:
            return np.empty((0, 2), dtype=float)
        lats = np.asarray([pt.lat for pt in points], dtype=float)
        lons = np.asarray([pt.lon for pt in points], dtype=float)
        xs = _wrap_degrees(lons - self.anchor.lon) * self.kx
        ys = (lats - self.anchor.lat) * self.ky
        return np.column_stack((xs, ys)).astype(float, copy=False)

    def unproject_points(self, points: MetricArray) -> List[GeoPoint]:
        """Convert planar points back to geodetic points."""

        return [self.unproject(row) for row in np.asarray(points, dtype=float)]

    def is_within_valid_range(self, points: MetricArray) -> bool:
        """Return True when every planar point lies inside the accurate radius."""

        array = np.asarray(points, dtype=float)
        if array.size == 0:
            return True
        radii = np.linalg.norm(array.reshape(-1, 2), axis=1)
        return bool(np.max(radii) <= PROJECTION_MAX_RADIUS_M)


def _wrap_degrees(delta):
    """Wrap a longitude difference into [-180, 180)."""

    return (delta + 180.0) % 360.0 - 180.0


def _normalize_longitude(lon: float) -> float:
    if lon > 180.0:
        return lon - 360.0
    if lon < -180.0:
        return lon + 360.0
    return lon


__all__ = ["FlatProjection", "MetricArray", "PlanarPoint", "centroid"]

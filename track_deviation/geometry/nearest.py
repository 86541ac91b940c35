"""Closest-point search against planar polylines and pointwise averaging."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from ..config import NEAREST_CHUNK_ELEMENTS

MetricArray = NDArray[np.float64]


def closest_point(
    point: Sequence[float],
    polyline: Iterable[Sequence[float]],
) -> Tuple[NDArray[np.float64], float]:
    """Return the nearest point on ``polyline`` to ``point`` and its distance.

    Each polyline edge is searched for the perpendicular foot of ``point``,
    clamped to the edge so the result may be an endpoint. A single-vertex
    polyline or a zero-length edge degenerates to the vertex itself. An empty
    polyline has no closest point: the result is ``(nan, nan)`` at an infinite
    distance.
    """

    query = np.asarray(point, dtype=float).reshape(2)
    line = as_metric_array(polyline)
    if len(line) == 0:
        return np.full(2, np.nan), float("inf")
    if len(line) == 1:
        nearest = line[0].copy()
        return nearest, float(np.linalg.norm(query - nearest))

    starts, vectors, lengths_sq = _edges(line)
    rel = query - starts
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.einsum("ij,ij->i", rel, vectors) / lengths_sq
    t = np.where(lengths_sq > 0, np.clip(t, 0.0, 1.0), 0.0)
    candidates = starts + t[:, None] * vectors
    distances = np.linalg.norm(candidates - query, axis=1)
    best = int(np.argmin(distances))
    return candidates[best].copy(), float(distances[best])


def closest_distances(
    points: Iterable[Sequence[float]],
    polyline: Iterable[Sequence[float]],
) -> MetricArray:
    """Return the distance from every point to its closest point on ``polyline``."""

    queries = as_metric_array(points)
    line = as_metric_array(polyline)
    if len(queries) == 0:
        return np.empty(0, dtype=float)
    if len(line) == 0:
        return np.full(len(queries), np.inf)
    if len(line) == 1:
        return np.linalg.norm(queries - line[0], axis=1)

    starts, vectors, lengths_sq = _edges(line)
    degenerate = lengths_sq <= 0
    rows = max(1, NEAREST_CHUNK_ELEMENTS // len(starts))
    result = np.empty(len(queries), dtype=float)
    for begin in range(0, len(queries), rows):
        block = queries[begin : begin + rows]
        rel = block[:, None, :] - starts[None, :, :]
        with np.errstate(divide="ignore", invalid="ignore"):
            t = np.einsum("ksd,sd->ks", rel, vectors) / lengths_sq
        t = np.where(degenerate, 0.0, np.clip(t, 0.0, 1.0))
        offsets = rel - t[..., None] * vectors[None, :, :]
        squared = np.einsum("ksd,ksd->ks", offsets, offsets)
        result[begin : begin + rows] = np.sqrt(np.min(squared, axis=1))
    return result


def distance_sum(
    points: Iterable[Sequence[float]],
    polyline: Iterable[Sequence[float]],
) -> Tuple[float, int]:
    """Return the summed closest-point distance and the number of points summed."""

    distances = closest_distances(points, polyline)
    return float(np.sum(distances)), int(distances.size)


def average_distance(
    points: Iterable[Sequence[float]],
    polyline: Iterable[Sequence[float]],
) -> float:
    """Return the mean closest-point distance of every vertex in ``points``.

    Infinite per-point distances (empty reference) are kept, so the mean is
    infinite rather than misleadingly small.
    """

    total, count = distance_sum(points, polyline)
    if count == 0:
        raise ValueError("Cannot average distances over an empty polyline")
    return total / count


def as_metric_array(points: Iterable[Sequence[float]]) -> MetricArray:
    """Convert an iterable of 2D coordinates into an ``(n, 2)`` float64 array."""

    if isinstance(points, np.ndarray):
        array = points.astype(float, copy=False)
    else:
        array = np.asarray(list(points), dtype=float)
    if array.size == 0:
        return np.empty((0, 2), dtype=float)
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError("Expected a sequence of 2D coordinates")
    return array


def _edges(
    line: MetricArray,
) -> Tuple[MetricArray, MetricArray, NDArray[np.float64]]:
    starts = line[:-1]
    vectors = np.diff(line, axis=0)
    lengths_sq = np.einsum("ij,ij->i", vectors, vectors)
    return starts, vectors, lengths_sq


__all__ = [
    "as_metric_array",
    "average_distance",
    "closest_distances",
    "closest_point",
    "distance_sum",
]

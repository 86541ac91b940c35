"""Shape similarity metrics between two planar polylines."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from ..config import NEAREST_CHUNK_ELEMENTS
from .nearest import as_metric_array

MetricArray = NDArray[np.float64]


def discrete_frechet_distance(
    track_points: Sequence[Sequence[float]],
    reference_points: Sequence[Sequence[float]],
) -> float:
    """Compute the discrete Fréchet distance between two sequences of points.

    The coupling table is filled one anti-diagonal (``i + j == k``) at a time.
    Every cell on a diagonal depends only on the two diagonals before it, so
    each diagonal is a single vectorised step and memory grows with the length
    of ``track_points`` only. Cost is O(n * m) distance evaluations spread over
    ``n + m - 1`` numpy passes.
    """

    a = as_metric_array(track_points)
    b = as_metric_array(reference_points)
    if len(a) == 0 or len(b) == 0:
        return float("inf")

    n, m = len(a), len(b)
    # Diagonals are indexed by row; cells off the diagonal stay infinite.
    before_last = np.full(n, np.inf)
    last = np.full(n, np.inf)
    for k in range(n + m - 1):
        rows = np.arange(max(0, k - m + 1), min(k, n - 1) + 1)
        dist = np.linalg.norm(a[rows] - b[k - rows], axis=1)
        current = np.full(n, np.inf)
        if k == 0:
            current[0] = dist[0]
        else:
            up = np.full(rows.size, np.inf)
            corner = np.full(rows.size, np.inf)
            inner = rows > 0
            up[inner] = last[rows[inner] - 1]
            corner[inner] = before_last[rows[inner] - 1]
            left = last[rows]
            current[rows] = np.maximum(
                dist, np.minimum(np.minimum(up, corner), left)
            )
        before_last, last = last, current
    return float(last[n - 1])


def directed_hausdorff_distance(
    source_points: Sequence[Sequence[float]],
    target_points: Sequence[Sequence[float]],
) -> float:
    """Return the largest distance from a source vertex to its nearest target vertex."""

    a = as_metric_array(source_points)
    b = as_metric_array(target_points)
    if len(a) == 0 or len(b) == 0:
        return float("inf")

    rows = max(1, NEAREST_CHUNK_ELEMENTS // len(b))
    worst = 0.0
    for begin in range(0, len(a), rows):
        block = a[begin : begin + rows]
        deltas = block[:, None, :] - b[None, :, :]
        squared = np.einsum("ijk,ijk->ij", deltas, deltas)
        worst = max(worst, float(np.max(np.min(squared, axis=1))))
    return float(np.sqrt(worst))


def discrete_hausdorff_distance(
    track_points: Sequence[Sequence[float]],
    reference_points: Sequence[Sequence[float]],
) -> float:
    """Compute the symmetric discrete Hausdorff distance between two vertex sets."""

    return max(
        directed_hausdorff_distance(track_points, reference_points),
        directed_hausdorff_distance(reference_points, track_points),
    )


__all__ = [
    "directed_hausdorff_distance",
    "discrete_frechet_distance",
    "discrete_hausdorff_distance",
]

"""Planar geometry for comparing GPS tracks.

This package projects geodetic tracks into a local metric frame and provides
the closest-point, simplification and similarity primitives used to measure
how far a candidate track deviates from a reference.
"""

from .projection import FlatProjection, MetricArray, PlanarPoint, centroid
from .preprocessing import join_track, polyline_length, simplify_points, track_length_m
from .nearest import average_distance, closest_distances, closest_point, distance_sum
from .similarity import (
    directed_hausdorff_distance,
    discrete_frechet_distance,
    discrete_hausdorff_distance,
)

__all__ = [
    "FlatProjection",
    "MetricArray",
    "PlanarPoint",
    "centroid",
    "join_track",
    "polyline_length",
    "simplify_points",
    "track_length_m",
    "average_distance",
    "closest_distances",
    "closest_point",
    "distance_sum",
    "directed_hausdorff_distance",
    "discrete_frechet_distance",
    "discrete_hausdorff_distance",
]

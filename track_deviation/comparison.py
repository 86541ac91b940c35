"""Compare candidate GPS tracks against a reference track.

One :class:`FlatProjection` is anchored at the reference centroid for the whole
run and the reference polyline is built once; every candidate track is then
joined, simplified and measured independently against it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import math
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .config import DEFAULT_SIMPLIFY_EPSILON_M
from .errors import EmptyReferenceError, EmptyTrackError, ProjectionError
from .geometry.nearest import average_distance
from .geometry.preprocessing import (
    join_track,
    polyline_length,
    simplify_points,
    track_length_m,
)
from .geometry.projection import FlatProjection, MetricArray
from .geometry.similarity import (
    discrete_frechet_distance,
    discrete_hausdorff_distance,
)
from .gpx_io import (
    export_path_for,
    read_track_file,
    validate_input_path,
    write_track_file,
)
from .models import ComparisonResult, Track, TrackFile, TrackSegment

PathLike = Union[str, Path]
TrackFileReader = Callable[[Path], TrackFile]
TrackFileWriter = Callable[[TrackFile, Path], object]
ResultCallback = Callable[[ComparisonResult], None]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CandidateFile:
    """A parsed candidate GPX file and the path it was read from."""

    path: Path
    track_file: TrackFile


@dataclass(slots=True)
class ComparisonInputs:
    """Everything a comparison run needs once inputs are loaded."""

    reference: Track
    candidates: List[CandidateFile] = field(default_factory=list)

    @property
    def total_tracks(self) -> int:
        return sum(len(candidate.track_file.tracks) for candidate in self.candidates)


@dataclass(frozen=True, slots=True)
class TrackComparison:
    """Metrics for one candidate plus the simplified polyline they came from."""

    result: ComparisonResult
    simplified_points: MetricArray


def resolve_reference_track(track_file: TrackFile) -> Track:
    """Pick the reference track from a parsed reference file.

    The first track wins. Without tracks, the waypoints become a single
    segment in file order.

    Raises:
        EmptyReferenceError: If the file has neither tracks nor waypoints, or
            the chosen track has no points.
    """

    if track_file.tracks:
        if len(track_file.tracks) > 1:
            LOGGER.warning(
                "The reference path contains %d tracks. Only the first track "
                "will be used; verify that this is the correct track.",
                len(track_file.tracks),
            )
        reference = track_file.tracks[0]
    elif track_file.waypoints:
        LOGGER.info(
            "The reference path does not contain any tracks; creating a track "
            "from its %d waypoints",
            len(track_file.waypoints),
        )
        reference = Track.from_waypoints(track_file.waypoints)
    else:
        raise EmptyReferenceError(
            "The reference path does not contain any tracks or waypoints"
        )

    if reference.point_count == 0:
        raise EmptyReferenceError(
            f"The reference track {reference.display_name!r} contains no points"
        )
    return reference


def load_inputs(
    reference_path: PathLike,
    candidate_paths: Sequence[PathLike],
    *,
    reader: TrackFileReader = read_track_file,
) -> ComparisonInputs:
    """Validate every path, then parse the reference and all candidate files.

    All paths are checked before any file is parsed, and all files are parsed
    before any comparison starts, so input errors abort the run up front.
    """

    reference_file_path = validate_input_path(reference_path, "reference")
    track_paths = [validate_input_path(path, "track") for path in candidate_paths]

    reference = resolve_reference_track(reader(reference_file_path))
    candidates = [CandidateFile(path=path, track_file=reader(path)) for path in track_paths]
    return ComparisonInputs(reference=reference, candidates=candidates)


class TrackComparator:
    """Measure candidate tracks against one reference in a shared planar frame."""

    def __init__(
        self,
        reference: Track,
        simplify_epsilon_m: float = DEFAULT_SIMPLIFY_EPSILON_M,
    ) -> None:
        if simplify_epsilon_m < 0:
            raise ValueError("simplify_epsilon_m must be non-negative")
        reference_points = list(reference.iter_points())
        if not reference_points:
            raise EmptyReferenceError(
                f"The reference track {reference.display_name!r} contains no points"
            )
        self.reference = reference
        self.simplify_epsilon_m = simplify_epsilon_m
        try:
            self.projection = FlatProjection.centred_on(reference_points)
        except ValueError as exc:
            raise ProjectionError(
                f"Cannot project the reference track {reference.display_name!r}: {exc}"
            ) from exc
        self.reference_polyline = join_track(reference, self.projection)
        self.reference_length_m = track_length_m(reference_points)
        LOGGER.debug(
            "Projection anchored at lat=%.6f lon=%.6f; reference has %d points, "
            "%.3fm geodesic / %.3fm planar",
            self.projection.anchor.lat,
            self.projection.anchor.lon,
            len(reference_points),
            self.reference_length_m,
            polyline_length(self.reference_polyline),
        )

    def compare(self, track: Track, track_index: int) -> TrackComparison:
        """Run join, simplify, aggregate and set-distance steps for one track.

        Raises:
            EmptyTrackError: If ``track`` has no points.
        """

        name = track.display_name
        points = list(track.iter_points())
        if not points:
            raise EmptyTrackError(f"Track {track_index} ({name}) contains no points")

        polyline = join_track(track, self.projection)
        if not self.projection.is_within_valid_range(polyline):
            LOGGER.warning(
                "Track %d (%s) extends beyond the accurate range of the local "
                "projection; distances may be distorted",
                track_index,
                name,
            )
        simplified = simplify_points(polyline, self.simplify_epsilon_m)
        LOGGER.debug(
            "Track %d: original points %d - simplified points %d",
            track_index,
            len(polyline),
            len(simplified),
        )

        result = ComparisonResult(
            track_index=track_index,
            track_name=name,
            current_track_length_m=track_length_m(points),
            reference_track_length_m=self.reference_length_m,
            average_distance_m=average_distance(polyline, self.reference_polyline),
            simplified_average_distance_m=average_distance(
                simplified, self.reference_polyline
            ),
            frechet_distance_m=discrete_frechet_distance(
                polyline, self.reference_polyline
            ),
            hausdorff_distance_m=discrete_hausdorff_distance(
                polyline, self.reference_polyline
            ),
        )
        if not all(
            math.isfinite(value)
            for value in (
                result.average_distance_m,
                result.simplified_average_distance_m,
                result.frechet_distance_m,
                result.hausdorff_distance_m,
            )
        ):
            LOGGER.error(
                "Track %d (%s) produced non-finite distances; the reference "
                "geometry is degenerate",
                track_index,
                name,
            )
        return TrackComparison(result=result, simplified_points=simplified)


def build_simplified_track(
    track: Track,
    simplified_points: MetricArray,
    projection: FlatProjection,
) -> Track:
    """Return a new track carrying ``track``'s metadata and one simplified segment."""

    return Track(
        name=track.name,
        description=track.description,
        track_type=track.track_type,
        segments=[TrackSegment(points=projection.unproject_points(simplified_points))],
    )


def build_export_file(track_file: TrackFile, tracks: Sequence[Track]) -> TrackFile:
    """Return a copy of ``track_file`` whose tracks are replaced by ``tracks``."""

    return replace(
        track_file,
        tracks=list(tracks),
        waypoints=list(track_file.waypoints),
    )


def compare_candidates(
    inputs: ComparisonInputs,
    *,
    simplify_epsilon_m: float = DEFAULT_SIMPLIFY_EPSILON_M,
    export_tracks: bool = False,
    writer: TrackFileWriter = write_track_file,
    on_result: Optional[ResultCallback] = None,
) -> List[ComparisonResult]:
    """Compare every track of every candidate file, in input order.

    Args:
        inputs: Loaded reference and candidate files.
        simplify_epsilon_m: Simplification tolerance in metres.
        export_tracks: When True, write ``<stem>.modified.gpx`` next to each
            candidate with its tracks replaced by their simplified versions.
        writer: Callable used to persist exported files.
        on_result: Optional callback invoked as soon as each result is ready.

    Returns:
        One :class:`ComparisonResult` per candidate track, in emission order.
    """

    comparator = TrackComparator(inputs.reference, simplify_epsilon_m)
    results: List[ComparisonResult] = []
    track_index = 0
    for candidate in inputs.candidates:
        exported: List[Track] = []
        for track in candidate.track_file.tracks:
            track_index += 1
            comparison = comparator.compare(track, track_index)
            results.append(comparison.result)
            if on_result is not None:
                on_result(comparison.result)
            if export_tracks:
                exported.append(
                    build_simplified_track(
                        track, comparison.simplified_points, comparator.projection
                    )
                )

        if export_tracks:
            export_path = export_path_for(candidate.path)
            writer(build_export_file(candidate.track_file, exported), export_path)
            LOGGER.info("Exported modified track file to %s", export_path)
    return results


def run_comparison(
    reference_path: PathLike,
    candidate_paths: Sequence[PathLike],
    *,
    simplify_epsilon_m: float = DEFAULT_SIMPLIFY_EPSILON_M,
    export_tracks: bool = False,
    reader: TrackFileReader = read_track_file,
    writer: TrackFileWriter = write_track_file,
    on_result: Optional[ResultCallback] = None,
) -> List[ComparisonResult]:
    """Load inputs and compare every candidate track against the reference."""

    inputs = load_inputs(reference_path, candidate_paths, reader=reader)
    return compare_candidates(
        inputs,
        simplify_epsilon_m=simplify_epsilon_m,
        export_tracks=export_tracks,
        writer=writer,
        on_result=on_result,
    )


__all__ = [
    "CandidateFile",
    "ComparisonInputs",
    "TrackComparator",
    "TrackComparison",
    "build_export_file",
    "build_simplified_track",
    "compare_candidates",
    "load_inputs",
    "resolve_reference_track",
    "run_comparison",
]

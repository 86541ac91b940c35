"""Central error types used across the application."""

from __future__ import annotations


class TrackComparisonError(RuntimeError):
    """Base error for failures that abort a comparison run."""


class InputNotFoundError(TrackComparisonError):
    """Raised when an input path does not exist."""


class InputNotAFileError(TrackComparisonError):
    """Raised when an input path exists but is not a regular file."""


class MalformedTrackFileError(TrackComparisonError):
    """Raised when a track file cannot be parsed as GPX."""


class EmptyReferenceError(TrackComparisonError):
    """Raised when the reference file holds no usable track or waypoints."""


class ConflictingOutputModesError(TrackComparisonError):
    """Raised when mutually exclusive output options are combined."""


class EmptyTrackError(TrackComparisonError):
    """Raised when a candidate track has no points to measure."""


class ProjectionError(TrackComparisonError):
    """Raised when the reference cannot anchor a local flat projection."""


__all__ = [
    "TrackComparisonError",
    "InputNotFoundError",
    "InputNotAFileError",
    "MalformedTrackFileError",
    "EmptyReferenceError",
    "ConflictingOutputModesError",
    "EmptyTrackError",
    "ProjectionError",
]

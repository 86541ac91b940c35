"""GPS track deviation comparison package."""

from .comparison import run_comparison
from .main import main
from .models import ComparisonResult, GeoPoint, Track, TrackFile, TrackSegment
from .errors import TrackComparisonError

__all__ = [
    "main",
    "run_comparison",
    "ComparisonResult",
    "GeoPoint",
    "Track",
    "TrackFile",
    "TrackSegment",
    "TrackComparisonError",
]

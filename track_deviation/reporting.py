"""Render comparison results for people and for machines."""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, List

from .config import REPORT_PRECISION
from .models import ComparisonResult


def format_header(reference_name: str, total_tracks: int) -> str:
    """Return the banner printed before per-track results."""

    return (
        f"Calculating average distance between reference path ({reference_name}) "
        f"and {total_tracks} track(s)..."
    )


def format_result(result: ComparisonResult, precision: int = REPORT_PRECISION) -> str:
    """Return a multi-line human readable block for one track."""

    def metres(value: float) -> str:
        return f"{value:.{precision}f}m"

    lines: List[str] = [
        f"Track {result.track_index}: {result.track_name}",
        f"  Track length: {metres(result.current_track_length_m)} "
        f"(reference: {metres(result.reference_track_length_m)})",
        f"  Average distance (in time): {metres(result.average_distance_m)} "
        "(counting every point)",
        "  Average distance (location dependent): "
        f"{metres(result.simplified_average_distance_m)} "
        "(counting only simplified points)",
        f"  Fréchet distance: {metres(result.frechet_distance_m)}",
        f"  Hausdorff distance: {metres(result.hausdorff_distance_m)}",
    ]
    return "\n".join(lines)


def format_json(results: Iterable[ComparisonResult]) -> str:
    """Return a JSON array of result records; non-finite values become null."""

    records = [
        {key: _json_value(value) for key, value in result.to_dict().items()}
        for result in results
    ]
    return json.dumps(records, indent=2, ensure_ascii=False, allow_nan=False)


def _json_value(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


__all__ = ["format_header", "format_json", "format_result"]

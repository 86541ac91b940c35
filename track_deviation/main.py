"""Command line entry point comparing GPS tracks against a reference path."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .comparison import compare_candidates, load_inputs
from .config import DEFAULT_SIMPLIFY_EPSILON_M, LOG_FORMAT
from .errors import ConflictingOutputModesError, TrackComparisonError
from .models import ComparisonResult
from .reporting import format_header, format_json, format_result

OUTPUT_HUMAN = "human"
OUTPUT_VERBOSE = "verbose"
OUTPUT_JSON = "json"

_LOG_LEVELS = {
    OUTPUT_HUMAN: logging.INFO,
    OUTPUT_VERBOSE: logging.DEBUG,
    OUTPUT_JSON: logging.WARNING,
}


def _non_negative_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("epsilon must be non-negative")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="track-deviation",
        description=(
            "Compare one or more GPS tracks to a reference path and report the"
            " average pointwise distance, Fréchet distance and Hausdorff"
            " distance between them."
        ),
    )
    parser.add_argument(
        "-r",
        "--reference",
        type=Path,
        required=True,
        help="GPX file containing the reference path",
    )
    parser.add_argument(
        "-t",
        "--track",
        action="append",
        required=True,
        metavar="PATHS",
        help=(
            "GPX file(s) with tracks to compare; separate multiple paths with a"
            " comma or repeat the option"
        ),
    )
    parser.add_argument(
        "-s",
        "--simplify-epsilon",
        type=_non_negative_float,
        default=DEFAULT_SIMPLIFY_EPSILON_M,
        help=(
            "Maximum deviation in metres tolerated when simplifying tracks"
            f" (default: {DEFAULT_SIMPLIFY_EPSILON_M:g})"
        ),
    )
    parser.add_argument(
        "-e",
        "--export-track",
        action="store_true",
        help="Also write each candidate file with simplified tracks as <name>.modified.gpx",
    )
    parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Print results as a JSON array instead of text",
    )
    parser.add_argument(
        "-v",
        "-d",
        "--verbose",
        "--debug",
        dest="verbose",
        action="store_true",
        help="Turn debugging information on",
    )
    return parser


def _split_track_paths(values: Sequence[str]) -> List[Path]:
    """Flatten repeated and comma separated ``--track`` values into paths."""

    paths: List[Path] = []
    for value in values:
        paths.extend(Path(part.strip()) for part in value.split(",") if part.strip())
    return paths


def _resolve_output_mode(args: argparse.Namespace) -> str:
    if args.verbose and args.json:
        raise ConflictingOutputModesError(
            "--verbose and --json cannot be used together"
        )
    if args.json:
        return OUTPUT_JSON
    if args.verbose:
        return OUTPUT_VERBOSE
    return OUTPUT_HUMAN


def _setup_logging(level: int) -> None:
    root = logging.getLogger()
    if not root.hasHandlers():
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)


def _print_result(result: ComparisonResult) -> None:
    print(format_result(result))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m track_deviation.main``."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        mode = _resolve_output_mode(args)
    except ConflictingOutputModesError as exc:
        _setup_logging(logging.WARNING)
        logging.error("%s", exc)
        return 1
    _setup_logging(_LOG_LEVELS[mode])

    track_paths = _split_track_paths(args.track)
    if not track_paths:
        logging.error("At least one track path is required")
        return 1

    logging.debug("Reference path: %s", args.reference)
    logging.debug("Track paths: %s", [str(path) for path in track_paths])
    logging.debug("Simplify epsilon: %s m", args.simplify_epsilon)

    try:
        inputs = load_inputs(args.reference, track_paths)
    except TrackComparisonError as exc:
        logging.error("%s", exc)
        return 1
    except OSError as exc:
        logging.error("Failed to read input: %s", exc)
        return 1

    human = mode != OUTPUT_JSON
    if human:
        print(format_header(inputs.reference.display_name, inputs.total_tracks))

    try:
        results = compare_candidates(
            inputs,
            simplify_epsilon_m=args.simplify_epsilon,
            export_tracks=args.export_track,
            on_result=_print_result if human else None,
        )
    except TrackComparisonError as exc:
        logging.error("%s", exc)
        return 1
    except OSError as exc:
        logging.error("Failed to export simplified tracks: %s", exc)
        return 1

    if not human:
        print(format_json(results))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

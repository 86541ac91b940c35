"""Central configuration for the track deviation tool.

All values are constants imported by the rest of the package. Tunables can be
overridden through environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Simplification
# ---------------------------------------------------------------------------
# Maximum deviation (metres) a dropped vertex may have from the simplified
# polyline. Expressed in the planar frame, never in degrees.
DEFAULT_SIMPLIFY_EPSILON_M = _env_float("TRACK_DEVIATION_SIMPLIFY_EPSILON_M", 1.0)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------
# Radius (metres) around the anchor within which the flat projection error
# stays negligible.
PROJECTION_MAX_RADIUS_M = 500_000.0


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# Upper bound on query x segment pairs evaluated per vectorised block during
# closest-point and Hausdorff searches.
NEAREST_CHUNK_ELEMENTS = _env_int("TRACK_DEVIATION_NEAREST_CHUNK_ELEMENTS", 250_000)


# ---------------------------------------------------------------------------
# Input/Output
# ---------------------------------------------------------------------------
# Display name used for tracks without a <name> element.
UNNAMED_TRACK_NAME = "-- Unnamed --"

# Replaces the candidate file extension when exporting simplified tracks.
EXPORT_SUFFIX = ".modified.gpx"

# Value written to the creator attribute of exported GPX files.
GPX_CREATOR = "track_deviation"

# Decimal places used for metre values in the human readable report.
REPORT_PRECISION = _env_int("TRACK_DEVIATION_REPORT_PRECISION", 3)

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

#!/usr/bin/env python3
"""Convenience runner for the track deviation tool.

Usage:
    python run.py --reference reference.gpx --track ride1.gpx,ride2.gpx
"""
from track_deviation.main import main

if __name__ == "__main__":
    raise SystemExit(main())

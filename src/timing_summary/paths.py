"""Where the summary cache and exported tables live by default."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "TimingSummary"
HOME_ENV_VAR = "TIMING_SUMMARY_HOME"
CACHE_FILENAME = "summary-cache.sqlite3"
OUTPUT_DIRNAME = "processed"


def get_data_dir() -> Path:
    """Return (and create) the data directory.

    ``TIMING_SUMMARY_HOME`` wins over the per-user platform directory, so a
    cache and its tables can be kept next to a project or on a shared drive.
    """
    override = os.environ.get(HOME_ENV_VAR, "").strip()
    if override:
        path = Path(override).expanduser()
    else:
        path = PlatformDirs(appname=APP_NAME, appauthor=False).user_data_path
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_db_path() -> Path:
    return get_data_dir() / CACHE_FILENAME


def get_output_dir() -> Path:
    return get_data_dir() / OUTPUT_DIRNAME

"""Read and structurally validate a Timing "All Activities" export."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Union

from .errors import InputProblem, InputValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("application", "duration", "startDate")


def load_activities(path: Path) -> list[dict[str, Any]]:
    """Load the export at ``path``; see :func:`parse_activities`."""
    path = Path(path)
    started = time.perf_counter()
    raw = path.read_bytes()
    logger.info("Read %s in %.1fs", path, time.perf_counter() - started)
    return parse_activities(raw)


def parse_activities(text: Union[str, bytes]) -> list[dict[str, Any]]:
    """Parse export text, rejecting inputs the aggregator cannot work with.

    Only the first record is checked for the expected fields; the
    aggregator tolerates bad values in the rest.
    """
    started = time.perf_counter()
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InputValidationError(
            InputProblem.NOT_JSON,
            "Invalid JSON file. Please select a valid Timing export.",
        ) from exc

    if not isinstance(data, list):
        raise InputValidationError(
            InputProblem.NOT_ARRAY,
            "Invalid file format. Expected an array of activities.",
        )
    if not data:
        raise InputValidationError(InputProblem.EMPTY, "File contains no activities.")

    sample = data[0]
    if not isinstance(sample, dict) or not all(sample.get(key) for key in REQUIRED_FIELDS):
        raise InputValidationError(
            InputProblem.MISSING_FIELDS,
            'Invalid activity format. Make sure this is a Timing "All Activities" export.',
        )

    logger.info(
        "Parsed %s records in %.1fs", f"{len(data):,}", time.perf_counter() - started
    )
    return data

"""Utilities to normalize device names, durations and timestamps."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from .config import DEFAULT_MACBOOK_LABEL

UNKNOWN = "Unknown"

# OS-generated suffix for duplicate device names, e.g. "MacBook Pro (2)".
_DUPLICATE_SUFFIX_PATTERN = re.compile(r"(?:\s*\(\d+\))+\s*$")

_INTEGER_TOKEN = re.compile(r"[+-]?\d+", re.ASCII)

_DEVICE_FAMILIES: tuple[tuple[str, Optional[str]], ...] = (
    ("macbook", None),
    ("iphone", "iPhone"),
    ("ipad", "iPad"),
)


def parse_duration(value: object) -> int:
    """Convert an ``H:MM:SS`` duration into seconds, or 0 if it is malformed."""
    if not isinstance(value, str):
        return 0
    parts = value.split(":")
    if len(parts) != 3:
        return 0
    tokens = [part.strip() for part in parts]
    if not all(_INTEGER_TOKEN.fullmatch(token) for token in tokens):
        return 0
    hours, minutes, seconds = (int(token) for token in tokens)
    return hours * 3600 + minutes * 60 + seconds


def normalize_device(
    device: Optional[str], macbook_label: str = DEFAULT_MACBOOK_LABEL
) -> str:
    """Collapse free-text device names into a small set of labels."""
    if not device:
        return UNKNOWN
    cleaned = _DUPLICATE_SUFFIX_PATTERN.sub("", device).strip()

    lowered = cleaned.lower()
    for needle, label in _DEVICE_FAMILIES:
        if needle in lowered:
            return label or macbook_label

    return cleaned or UNKNOWN


def normalize_application(application: Optional[str]) -> str:
    return application or UNKNOWN


def parse_start(value: object) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    A trailing ``Z`` and naive timestamps are both read as UTC. Returns
    ``None`` when the value cannot be parsed.
    """
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None

from __future__ import annotations

import json
from pathlib import Path

import pytest


def make_record(
    application: str = "Safari",
    device: str = "MacBook Pro",
    duration: str = "0:10:00",
    start: str = "2024-01-15T10:00:00Z",
    end: str = "2024-01-15T10:10:00Z",
) -> dict:
    return {
        "application": application,
        "device": device,
        "duration": duration,
        "startDate": start,
        "endDate": end,
    }


def strip_processed_at(data: dict) -> dict:
    copied = json.loads(json.dumps(data))
    copied["metadata"].pop("processedAt")
    return copied


@pytest.fixture
def sample_records() -> list[dict]:
    return [
        make_record("Safari", "Benjamin's MacBook Pro (2)", "1:30:00", "2024-01-15T10:00:00Z"),
        make_record("Xcode", "Benjamin's MacBook Pro", "0:45:00", "2024-01-15T14:30:00Z"),
        make_record("Messages", "Ben's iPhone", "0:05:30", "2024-01-15T23:50:00Z"),
        make_record("Safari", "iPad Air", "0:20:00", "2024-01-16T08:00:00+02:00"),
        make_record("", "", "0:01:00", "2024-02-01T00:30:00Z"),
        make_record("Safari", "MacBook Air", "invalid", "2024-02-01T09:00:00Z"),
        make_record("Mail", "Studio Display (3)", "0:00:00", "2024-02-02T09:00:00Z"),
        make_record("Mail", "Mac mini", "2:00:00", "2024-02-02T09:15:00Z"),
    ]


@pytest.fixture
def export_file(tmp_path: Path, sample_records: list[dict]) -> Path:
    path = tmp_path / "All Activities.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path

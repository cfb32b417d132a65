"""Domain models for raw activities and accumulator buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, TypedDict


class _RawActivityRequired(TypedDict):
    application: str
    device: str
    duration: str
    startDate: str
    endDate: str


class RawActivity(_RawActivityRequired, total=False):
    """One record of a Timing "All Activities" export."""

    id: str
    project: str
    path: str
    activityTitle: str


@dataclass(slots=True)
class DailyBucket:
    total_seconds: int = 0
    activity_count: int = 0
    # Insertion ordered; first-seen app wins ties for the day's top app.
    apps: dict[str, int] = field(default_factory=dict)
    devices: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class AppBucket:
    total_seconds: int = 0
    activity_count: int = 0
    devices: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class DeviceBucket:
    total_seconds: int = 0
    activity_count: int = 0


@dataclass(slots=True)
class PeriodBucket:
    """Hourly or monthly rollup slot that also tracks contributing dates."""

    total_seconds: int = 0
    activity_count: int = 0
    days: set[str] = field(default_factory=set)


@dataclass(slots=True)
class AccumulatorState:
    """Everything one aggregation run accumulates. Never shared between runs."""

    daily: dict[str, DailyBucket] = field(default_factory=dict)
    apps: dict[str, AppBucket] = field(default_factory=dict)
    devices: dict[str, DeviceBucket] = field(default_factory=dict)
    hourly: dict[int, PeriodBucket] = field(default_factory=dict)
    monthly: dict[str, PeriodBucket] = field(default_factory=dict)
    total_records: int = 0
    total_seconds: int = 0
    first_date: str = ""
    last_date: str = ""
    skipped_invalid_dates: int = 0
    processed_at: Optional[datetime] = None

"""Filtered dashboard views, recomputed from the raw records."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Collection, Dict, Iterator, Mapping, Optional, Sequence

from .config import DEFAULT_MACBOOK_LABEL, AggregatorSettings
from .driver import ProgressCallback, aggregate, aggregate_async
from .normalization import normalize_device, parse_start


class TimeRange(str, Enum):
    WEEK = "week"
    DAYS_30 = "30d"
    DAYS_90 = "90d"
    YEAR = "year"
    TWO_YEARS = "2year"
    THREE_YEARS = "3year"
    ALL = "all"


TIME_RANGE_LABELS: dict[TimeRange, str] = {
    TimeRange.WEEK: "7 Days",
    TimeRange.DAYS_30: "30 Days",
    TimeRange.DAYS_90: "90 Days",
    TimeRange.YEAR: "1 Year",
    TimeRange.TWO_YEARS: "2 Years",
    TimeRange.THREE_YEARS: "3 Years",
    TimeRange.ALL: "All Time",
}

_RANGE_SPANS: dict[TimeRange, timedelta] = {
    TimeRange.WEEK: timedelta(days=7),
    TimeRange.DAYS_30: timedelta(days=30),
    TimeRange.DAYS_90: timedelta(days=90),
    TimeRange.YEAR: timedelta(days=365),
    TimeRange.TWO_YEARS: timedelta(days=2 * 365),
    TimeRange.THREE_YEARS: timedelta(days=3 * 365),
}


def date_cutoff(
    time_range: TimeRange, now: Optional[datetime] = None
) -> Optional[datetime]:
    span = _RANGE_SPANS.get(TimeRange(time_range))
    if span is None:
        return None
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - span


def filter_records(
    records: Sequence[Mapping[str, Any]],
    devices: Optional[Collection[str]] = None,
    time_range: TimeRange = TimeRange.ALL,
    now: Optional[datetime] = None,
    macbook_label: Optional[str] = None,
) -> Iterator[Mapping[str, Any]]:
    """Yield the records that started inside ``time_range`` on ``devices``.

    ``devices`` holds normalized labels; ``None`` keeps every device.
    Records with an unparseable start date are dropped once a time range
    is set, since they cannot be placed on either side of the cutoff.
    """
    cutoff = date_cutoff(time_range, now)
    selected = set(devices) if devices is not None else None
    label = macbook_label or DEFAULT_MACBOOK_LABEL
    for record in records:
        if selected is not None:
            if normalize_device(record.get("device"), label) not in selected:
                continue
        if cutoff is not None:
            started = parse_start(record.get("startDate"))
            if started is None or started < cutoff:
                continue
        yield record


def filtered_dashboard(
    records: Sequence[Mapping[str, Any]],
    devices: Optional[Collection[str]] = None,
    time_range: TimeRange = TimeRange.ALL,
    settings: Optional[AggregatorSettings] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Aggregate only the selected records into a full dashboard."""
    settings = settings or AggregatorSettings()
    selected = list(
        filter_records(
            records,
            devices=devices,
            time_range=time_range,
            now=now,
            macbook_label=settings.macbook_label,
        )
    )
    return aggregate(selected, settings)


async def filtered_dashboard_async(
    records: Sequence[Mapping[str, Any]],
    devices: Optional[Collection[str]] = None,
    time_range: TimeRange = TimeRange.ALL,
    settings: Optional[AggregatorSettings] = None,
    now: Optional[datetime] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> Dict[str, Any]:
    """Like :func:`filtered_dashboard`, yielding to the event loop between slices."""
    settings = settings or AggregatorSettings()
    selected = list(
        filter_records(
            records,
            devices=devices,
            time_range=time_range,
            now=now,
            macbook_label=settings.macbook_label,
        )
    )
    return await aggregate_async(selected, settings, on_progress)

"""Turn accumulated buckets into the exported dashboard tables."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .models import AccumulatorState, PeriodBucket

TABLE_NAMES = (
    "dailySummary",
    "appTotals",
    "deviceTotals",
    "hourlyPatterns",
    "monthlyTrends",
    "metadata",
)


def materialize(
    state: AccumulatorState, processed_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """Build the five summary tables plus metadata from ``state``.

    Read-only with respect to ``state``. ``processedAt`` comes from
    ``processed_at``, then the state's own stamp, then the current time, so
    materializing a finished state twice yields identical output.
    """
    stamp = processed_at or state.processed_at or datetime.now(timezone.utc)
    return {
        "dailySummary": build_daily_summary(state),
        "appTotals": build_app_totals(state),
        "deviceTotals": build_device_totals(state),
        "hourlyPatterns": build_hourly_patterns(state),
        "monthlyTrends": build_monthly_trends(state),
        "metadata": {
            "firstDate": state.first_date,
            "lastDate": state.last_date,
            "totalDays": len(state.daily),
            "totalSeconds": state.total_seconds,
            "totalActivities": state.total_records,
            "processedAt": format_timestamp(stamp),
        },
    }


def build_daily_summary(state: AccumulatorState) -> list[Dict[str, Any]]:
    entries = []
    for date, day in state.daily.items():
        top_app = ""
        top_seconds = 0
        for app, seconds in day.apps.items():
            # Strict comparison keeps the first-seen app on ties.
            if seconds > top_seconds:
                top_app = app
                top_seconds = seconds
        entries.append(
            {
                "date": date,
                "totalSeconds": day.total_seconds,
                "activityCount": day.activity_count,
                "topApp": top_app,
                "devices": _sorted_mapping(day.devices),
            }
        )
    entries.sort(key=lambda item: item["date"])
    return entries


def build_app_totals(state: AccumulatorState) -> list[Dict[str, Any]]:
    entries = [
        {
            "application": app,
            "totalSeconds": bucket.total_seconds,
            "activityCount": bucket.activity_count,
            "avgSessionSeconds": _ratio(bucket.total_seconds, bucket.activity_count),
            "devices": _sorted_mapping(bucket.devices),
        }
        for app, bucket in state.apps.items()
    ]
    entries.sort(key=lambda item: item["totalSeconds"], reverse=True)
    return entries


def build_device_totals(state: AccumulatorState) -> list[Dict[str, Any]]:
    entries = [
        {
            "device": device,
            "totalSeconds": bucket.total_seconds,
            "activityCount": bucket.activity_count,
            "percentage": percentage(bucket.total_seconds, state.total_seconds),
        }
        for device, bucket in state.devices.items()
    ]
    entries.sort(key=lambda item: item["totalSeconds"], reverse=True)
    return entries


def build_hourly_patterns(state: AccumulatorState) -> list[Dict[str, Any]]:
    patterns = []
    for hour in range(24):
        bucket = state.hourly.get(hour) or PeriodBucket()
        patterns.append(
            {
                "hour": hour,
                "totalSeconds": bucket.total_seconds,
                "activityCount": bucket.activity_count,
                "avgSecondsPerDay": _ratio(bucket.total_seconds, len(bucket.days)),
            }
        )
    return patterns


def build_monthly_trends(state: AccumulatorState) -> list[Dict[str, Any]]:
    entries = [
        {
            "month": month,
            "totalSeconds": bucket.total_seconds,
            "activityCount": bucket.activity_count,
            "avgSecondsPerDay": _ratio(bucket.total_seconds, len(bucket.days)),
            "activeDays": len(bucket.days),
        }
        for month, bucket in state.monthly.items()
    ]
    entries.sort(key=lambda item: item["month"])
    return entries


def round_half_away(value: float) -> int:
    """Round to the nearest integer, with halves going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def percentage(part: int, whole: int) -> float:
    """Share of ``whole`` as a percentage with two decimal places."""
    if whole == 0:
        return 0.0
    return round_half_away(part / whole * 10000) / 100


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def _ratio(total: int, count: int) -> int:
    if count == 0:
        return 0
    return round_half_away(total / count)


def _sorted_mapping(values: dict[str, int]) -> dict[str, int]:
    return {key: values[key] for key in sorted(values)}

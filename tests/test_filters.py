from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from conftest import make_record, strip_processed_at
from timing_summary.config import DEFAULT_MACBOOK_LABEL, AggregatorSettings
from timing_summary.driver import aggregate
from timing_summary.filters import (
    TimeRange,
    date_cutoff,
    filter_records,
    filtered_dashboard,
    filtered_dashboard_async,
)

NOW = datetime(2024, 2, 3, tzinfo=timezone.utc)


def test_date_cutoff():
    assert date_cutoff(TimeRange.ALL, NOW) is None
    assert date_cutoff(TimeRange.WEEK, NOW) == datetime(2024, 1, 27, tzinfo=timezone.utc)
    assert date_cutoff("30d", NOW) == datetime(2024, 1, 4, tzinfo=timezone.utc)


def test_device_filter_uses_normalized_labels(sample_records):
    kept = list(filter_records(sample_records, devices={"iPhone", "iPad"}))
    assert [record["application"] for record in kept] == ["Messages", "Safari"]


def test_filtered_dashboard_equals_fresh_aggregation(sample_records):
    selected = [
        record
        for record in sample_records
        if record["device"] in ("Benjamin's MacBook Pro (2)", "Benjamin's MacBook Pro", "MacBook Air")
    ]
    filtered = filtered_dashboard(sample_records, devices=[DEFAULT_MACBOOK_LABEL])
    assert strip_processed_at(filtered) == strip_processed_at(aggregate(selected))
    assert filtered["metadata"]["totalSeconds"] == 8100
    assert [device["device"] for device in filtered["deviceTotals"]] == [DEFAULT_MACBOOK_LABEL]
    assert filtered["deviceTotals"][0]["percentage"] == 100.0


def test_time_range_filter(sample_records):
    filtered = filtered_dashboard(sample_records, time_range=TimeRange.WEEK, now=NOW)
    assert [day["date"] for day in filtered["dailySummary"]] == ["2024-02-01", "2024-02-02"]
    assert filtered["metadata"]["totalSeconds"] == 7260
    assert sum(hour["totalSeconds"] for hour in filtered["hourlyPatterns"]) == 7260


def test_time_range_drops_unparseable_dates():
    records = [make_record(start="garbage"), make_record(start="2024-02-02T00:00:00Z")]
    kept = list(filter_records(records, time_range=TimeRange.WEEK, now=NOW))
    assert len(kept) == 1


def test_async_filtered_dashboard_matches_sync(sample_records):
    expected = filtered_dashboard(sample_records, devices=["iPhone", "iPad"])
    result = asyncio.run(
        filtered_dashboard_async(sample_records, devices=["iPhone", "iPad"])
    )
    assert strip_processed_at(result) == strip_processed_at(expected)
    assert result["metadata"]["totalSeconds"] == 1530


def test_async_filtered_dashboard_yields_between_slices():
    records = [make_record() for _ in range(6)] + [make_record(device="iPhone")]
    order = []

    async def ticker():
        for _ in range(3):
            order.append("tick")
            await asyncio.sleep(0)

    async def run():
        result, _ = await asyncio.gather(
            filtered_dashboard_async(
                records,
                devices=[DEFAULT_MACBOOK_LABEL],
                settings=AggregatorSettings(chunk_size=2),
                on_progress=lambda phase, current, total: order.append(current),
            ),
            ticker(),
        )
        return result

    result = asyncio.run(run())
    assert order[:5] == [2, "tick", 4, "tick", 6]
    assert result["metadata"]["totalActivities"] == 6

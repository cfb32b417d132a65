"""Single-pass aggregation of raw activities into five rollups."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from .config import AggregatorSettings
from .errors import InvalidTimestampError
from .models import (
    AccumulatorState,
    AppBucket,
    DailyBucket,
    DeviceBucket,
    PeriodBucket,
)
from .normalization import (
    normalize_application,
    normalize_device,
    parse_duration,
    parse_start,
)

logger = logging.getLogger(__name__)


class Aggregator:
    """Feeds raw activity records into a fresh :class:`AccumulatorState`.

    Not thread-safe: ``ingest`` must be driven by one caller, strictly in
    order. Each call adds to the totals, so ingesting a record twice
    doubles its contribution; start a new ``Aggregator`` for a new input.

    Dates and hours are always taken from ``startDate`` in UTC, never local
    time. A record whose ``startDate`` cannot be parsed is counted in
    ``total_records`` but contributes no time, unless ``strict_dates`` is
    set, in which case :class:`InvalidTimestampError` aborts the run.
    """

    def __init__(self, settings: Optional[AggregatorSettings] = None) -> None:
        self.settings = settings or AggregatorSettings()
        self.state = AccumulatorState()

    def ingest(self, record: Mapping[str, Any]) -> None:
        state = self.state
        state.total_records += 1

        seconds = parse_duration(record.get("duration"))
        if seconds <= 0:
            return

        raw_start = record.get("startDate")
        started = parse_start(raw_start)
        if started is None:
            if self.settings.strict_dates:
                raise InvalidTimestampError(raw_start, state.total_records - 1)
            state.skipped_invalid_dates += 1
            return

        state.total_seconds += seconds

        date_key = started.date().isoformat()
        hour = started.hour
        month_key = date_key[:7]

        if not state.first_date or date_key < state.first_date:
            state.first_date = date_key
        if not state.last_date or date_key > state.last_date:
            state.last_date = date_key

        device = normalize_device(record.get("device"), self.settings.macbook_label)
        app = normalize_application(record.get("application"))

        day = state.daily.get(date_key)
        if day is None:
            day = state.daily[date_key] = DailyBucket()
        day.total_seconds += seconds
        day.activity_count += 1
        day.apps[app] = day.apps.get(app, 0) + seconds
        day.devices[device] = day.devices.get(device, 0) + seconds

        app_bucket = state.apps.get(app)
        if app_bucket is None:
            app_bucket = state.apps[app] = AppBucket()
        app_bucket.total_seconds += seconds
        app_bucket.activity_count += 1
        app_bucket.devices[device] = app_bucket.devices.get(device, 0) + seconds

        device_bucket = state.devices.get(device)
        if device_bucket is None:
            device_bucket = state.devices[device] = DeviceBucket()
        device_bucket.total_seconds += seconds
        device_bucket.activity_count += 1

        _add_to_period(state.hourly, hour, seconds, date_key)
        _add_to_period(state.monthly, month_key, seconds, date_key)

    def ingest_many(self, records: Iterable[Mapping[str, Any]]) -> None:
        for record in records:
            self.ingest(record)

    def finish(self) -> AccumulatorState:
        """Stamp the run as complete and hand back the accumulated state."""
        state = self.state
        if state.processed_at is None:
            state.processed_at = datetime.now(timezone.utc)
        if state.skipped_invalid_dates:
            logger.warning(
                "Skipped %d of %d records with an unparseable startDate.",
                state.skipped_invalid_dates,
                state.total_records,
            )
        logger.debug(
            "Aggregated %d records into %d days, %d apps, %d devices.",
            state.total_records,
            len(state.daily),
            len(state.apps),
            len(state.devices),
        )
        return state


def _add_to_period(
    buckets: dict, key: object, seconds: int, date_key: str
) -> None:
    bucket = buckets.get(key)
    if bucket is None:
        bucket = buckets[key] = PeriodBucket()
    bucket.total_seconds += seconds
    bucket.activity_count += 1
    bucket.days.add(date_key)

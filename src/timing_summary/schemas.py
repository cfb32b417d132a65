"""Pydantic models describing the exported dashboard schema."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Table(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DailySummary(_Table):
    date: str
    total_seconds: int
    activity_count: int
    top_app: str
    devices: Dict[str, int]


class AppTotal(_Table):
    application: str
    total_seconds: int
    activity_count: int
    avg_session_seconds: int
    devices: Dict[str, int]


class DeviceTotal(_Table):
    device: str
    total_seconds: int
    activity_count: int
    percentage: float


class HourlyPattern(_Table):
    hour: int
    total_seconds: int
    activity_count: int
    avg_seconds_per_day: int


class MonthlyTrend(_Table):
    month: str
    total_seconds: int
    activity_count: int
    avg_seconds_per_day: int
    active_days: int


class Metadata(_Table):
    first_date: str
    last_date: str
    total_days: int
    total_seconds: int
    total_activities: int
    processed_at: str


class DashboardData(_Table):
    daily_summary: List[DailySummary]
    app_totals: List[AppTotal]
    device_totals: List[DeviceTotal]
    hourly_patterns: List[HourlyPattern]
    monthly_trends: List[MonthlyTrend]
    metadata: Metadata

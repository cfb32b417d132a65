"""Simple reporting utilities for CLI output."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable


class SummaryPrinter:
    """Render human-readable summaries of a dashboard in the console."""

    def __init__(self, data: Dict[str, Any]) -> None:
        self.data = data

    def print_overview(self) -> None:
        metadata = self.data["metadata"]
        print("Summary:")
        print(f"  Total time:  {round(metadata['totalSeconds'] / 3600):,} hours")
        print(f"  Date range:  {metadata['firstDate']} to {metadata['lastDate']}")
        print(f"  Active days: {metadata['totalDays']}")
        print(f"  Activities:  {metadata['totalActivities']:,}")
        print(f"  Unique apps: {len(self.data['appTotals'])}")
        print(f"  Devices:     {len(self.data['deviceTotals'])}")

    def print_top_apps(self, limit: int = 10) -> None:
        apps = self.data["appTotals"][:limit]
        if not apps:
            return
        print()
        print("Top applications:")
        for app in apps:
            print(
                f"  {app['application'][:30]:<30} "
                f"{format_duration(app['totalSeconds']):>10}  "
                f"avg {format_duration_detailed(app['avgSessionSeconds'])}"
            )

    def print_devices(self) -> None:
        devices = self.data["deviceTotals"]
        if not devices:
            return
        print()
        print("Devices:")
        for device in devices:
            print(
                f"  {device['device'][:30]:<30} "
                f"{format_duration(device['totalSeconds']):>10}  "
                f"{device['percentage']:.2f}%"
            )

    def print_busiest_hours(self, limit: int = 3) -> None:
        busiest = busiest_hours(self.data["hourlyPatterns"], limit)
        if not busiest:
            return
        print()
        print("Busiest hours (UTC):")
        for hour in busiest:
            print(
                f"  {format_hour(hour['hour']):<6} "
                f"{format_duration(hour['avgSecondsPerDay'])} per active day"
            )


def busiest_hours(patterns: Iterable[Dict[str, Any]], limit: int) -> list[Dict[str, Any]]:
    active = [pattern for pattern in patterns if pattern["totalSeconds"] > 0]
    return sorted(active, key=lambda item: item["totalSeconds"], reverse=True)[:limit]


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{round(seconds)}s"
    hours = math.floor(seconds / 3600)
    minutes = math.floor((seconds % 3600) / 60)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def format_duration_detailed(seconds: float) -> str:
    hours = math.floor(seconds / 3600)
    minutes = math.floor((seconds % 3600) / 60)
    secs = round(seconds % 60)
    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def format_hour(hour: int) -> str:
    if hour == 0:
        return "12am"
    if hour == 12:
        return "12pm"
    if hour < 12:
        return f"{hour}am"
    return f"{hour - 12}pm"

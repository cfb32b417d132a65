"""Write the dashboard tables as one JSON file each."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

TABLE_FILES: dict[str, str] = {
    "dailySummary": "daily-summary.json",
    "appTotals": "app-totals.json",
    "deviceTotals": "device-totals.json",
    "hourlyPatterns": "hourly-patterns.json",
    "monthlyTrends": "monthly-trends.json",
    "metadata": "metadata.json",
}


def write_tables(data: Dict[str, Any], out_dir: Path) -> list[tuple[Path, int]]:
    """Write every table under ``out_dir``; returns ``(path, compact size)`` pairs."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[tuple[Path, int]] = []
    for table, filename in TABLE_FILES.items():
        path = out_dir / filename
        path.write_text(json.dumps(data[table], indent=2), encoding="utf-8")
        size = len(json.dumps(data[table], separators=(",", ":")))
        logger.info("Wrote %s (%.1f KB)", filename, size / 1024)
        written.append((path, size))
    return written


def read_tables(out_dir: Path) -> Optional[Dict[str, Any]]:
    """Load a previously exported dashboard, or ``None`` if any file is missing."""
    out_dir = Path(out_dir)
    data: Dict[str, Any] = {}
    for table, filename in TABLE_FILES.items():
        path = out_dir / filename
        if not path.exists():
            return None
        data[table] = json.loads(path.read_text(encoding="utf-8"))
    return data

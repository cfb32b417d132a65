"""Helpers to launch the local dashboard API."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import AggregatorSettings
from .db import load_dashboard
from .paths import get_db_path
from .webapp import create_app

logger = logging.getLogger(__name__)


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    db_path: Optional[Path] = None,
    settings: Optional[AggregatorSettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Start the FastAPI app and optionally open its docs page."""
    resolved_db_path = Path(db_path or get_db_path())
    resolved_settings = settings or AggregatorSettings()
    app = create_app(db_path=resolved_db_path, settings=resolved_settings)
    describe_store(resolved_db_path, resolved_settings)

    if open_browser:
        url = f"http://{host}:{port}/docs"
        threading.Thread(
            target=_launch_browser_after_delay, args=(url,), daemon=True
        ).start()

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)


def describe_store(db_path: Path, settings: AggregatorSettings) -> None:
    """Log where uploads will be cached and what is already stored there."""
    logger.info(
        "Caching dashboards in %s (chunk size %s, MacBook label %r)",
        db_path,
        f"{settings.chunk_size:,}",
        settings.macbook_label,
    )
    stored = load_dashboard(db_path)
    if stored is None:
        logger.info("No processed data stored yet; POST an export to /api/upload.")
        return
    metadata = stored["metadata"]
    logger.info(
        "Serving stored dashboard: %s to %s, %s activities (processed %s)",
        metadata["firstDate"],
        metadata["lastDate"],
        f"{metadata['totalActivities']:,}",
        metadata["processedAt"],
    )


def _launch_browser_after_delay(url: str) -> None:
    time.sleep(1.0)
    try:
        webbrowser.open(url)
    except Exception:
        logger.exception("Failed to launch browser for %s", url)

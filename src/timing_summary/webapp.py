"""FastAPI application that accepts exports and serves the processed dashboard."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import AggregatorSettings
from .db import clear_dashboard, has_dashboard, load_dashboard, save_dashboard
from .driver import aggregate_async
from .errors import BlobTooLargeError, InputValidationError, StorageError
from .filters import TIME_RANGE_LABELS, TimeRange, filtered_dashboard_async
from .loader import parse_activities
from .paths import get_db_path
from .summary import TABLE_NAMES

logger = logging.getLogger(__name__)


class UploadProgress:
    """Latest progress report of the running (or last) upload."""

    def __init__(self) -> None:
        self.phase = "idle"
        self.current = 0
        self.total = 0

    def update(self, phase: str, current: int, total: int) -> None:
        self.phase = phase
        self.current = current
        self.total = total

    def as_dict(self) -> Dict[str, Any]:
        percent = round(self.current / self.total * 100) if self.total > 0 else 0
        return {
            "phase": self.phase,
            "current": self.current,
            "total": self.total,
            "percent": percent,
        }


def create_app(
    *,
    db_path: Optional[Path] = None,
    settings: Optional[AggregatorSettings] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_db_path = Path(db_path or get_db_path())
    resolved_settings = settings or AggregatorSettings()
    progress = UploadProgress()

    app = FastAPI(title="Timing Summary", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.db_path = resolved_db_path
    app.state.settings = resolved_settings
    app.state.progress = progress

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        return {
            "database_path": str(request.app.state.db_path),
            "has_data": has_dashboard(request.app.state.db_path),
            "chunk_size": resolved_settings.chunk_size,
            "progress": request.app.state.progress.as_dict(),
        }

    @app.get("/api/time-ranges")
    def time_ranges() -> Dict[str, Any]:
        return {
            "ranges": [
                {"value": value.value, "label": label}
                for value, label in TIME_RANGE_LABELS.items()
            ]
        }

    @app.post("/api/upload")
    async def upload(request: Request) -> Dict[str, Any]:
        body = await request.body()
        progress.update("Parsing JSON", 0, 1)
        try:
            records = parse_activities(body)
        except InputValidationError as exc:
            progress.update("error", 0, 0)
            raise HTTPException(
                status_code=400,
                detail={"reason": exc.reason.value, "message": str(exc)},
            ) from exc

        data = await aggregate_async(records, resolved_settings, progress.update)

        try:
            save_dashboard(
                request.app.state.db_path,
                data,
                max_bytes=resolved_settings.max_blob_bytes,
            )
        except BlobTooLargeError as exc:
            raise HTTPException(status_code=413, detail=str(exc)) from exc
        except StorageError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return data

    @app.post("/api/filter")
    async def filter_upload(
        request: Request,
        time_range: TimeRange = Query(
            default=TimeRange.ALL,
            alias="range",
            description="Only include activities started inside this window.",
        ),
        device: Optional[List[str]] = Query(
            default=None,
            description="Normalized device labels to keep (repeatable).",
        ),
    ) -> Dict[str, Any]:
        body = await request.body()
        try:
            records = parse_activities(body)
        except InputValidationError as exc:
            raise HTTPException(
                status_code=400,
                detail={"reason": exc.reason.value, "message": str(exc)},
            ) from exc
        return await filtered_dashboard_async(
            records, devices=device, time_range=time_range, settings=resolved_settings
        )

    @app.get("/api/dashboard")
    def dashboard(request: Request) -> Dict[str, Any]:
        data = load_dashboard(request.app.state.db_path)
        if data is None:
            raise HTTPException(status_code=404, detail="No processed data stored")
        return data

    @app.get("/api/tables/{name}")
    def table(name: str, request: Request) -> Any:
        if name not in TABLE_NAMES:
            raise HTTPException(status_code=404, detail=f"Unknown table: {name}")
        data = load_dashboard(request.app.state.db_path)
        if data is None:
            raise HTTPException(status_code=404, detail="No processed data stored")
        return data[name]

    @app.delete("/api/dashboard")
    def delete_dashboard(request: Request) -> Dict[str, Any]:
        try:
            removed = clear_dashboard(request.app.state.db_path)
        except StorageError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        progress.update("idle", 0, 0)
        return {"cleared": removed}

    return app

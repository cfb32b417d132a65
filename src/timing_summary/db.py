"""SQLite key-value store used to cache the processed dashboard."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from pydantic import ValidationError

from .errors import BlobTooLargeError, StorageError
from .schemas import DashboardData

logger = logging.getLogger(__name__)

STORAGE_KEY = "timing-dashboard-data"
DEFAULT_MAX_BLOB_BYTES = 5 * 1024 * 1024


def open_database(path: Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(
    path: Path, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS blobs (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """
    )


def put_blob(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        """
        INSERT INTO blobs (key, value, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET
            value = excluded.value,
            updated_at = excluded.updated_at
        """,
        (key, value, datetime.now(timezone.utc).isoformat()),
    )


def get_blob(conn: sqlite3.Connection, key: str) -> Optional[str]:
    row = conn.execute("SELECT value FROM blobs WHERE key = ?", (key,)).fetchone()
    return row["value"] if row is not None else None


def delete_blob(conn: sqlite3.Connection, key: str) -> bool:
    cur = conn.execute("DELETE FROM blobs WHERE key = ?", (key,))
    return cur.rowcount > 0


def save_dashboard(
    path: Path,
    data: Dict[str, Any],
    *,
    max_bytes: int = DEFAULT_MAX_BLOB_BYTES,
) -> int:
    """Persist ``data`` under the fixed storage key; returns the blob size."""
    blob = json.dumps(data, separators=(",", ":"))
    size = len(blob.encode("utf-8"))
    if size > max_bytes:
        raise BlobTooLargeError(size, max_bytes)
    try:
        with database_connection(path) as conn:
            put_blob(conn, STORAGE_KEY, blob)
    except sqlite3.Error as exc:
        logger.error("Failed to save dashboard to %s: %s", path, exc)
        raise StorageError(f"Failed to save data to {path}: {exc}") from exc
    logger.debug("Stored dashboard blob (%d bytes) in %s", size, path)
    return size


def load_dashboard(path: Path) -> Optional[Dict[str, Any]]:
    """Return the stored dashboard, or ``None`` if absent or unreadable.

    A blob written with an incompatible schema is treated as absent.
    """
    path = Path(path)
    if not path.exists():
        return None
    try:
        with database_connection(path) as conn:
            blob = get_blob(conn, STORAGE_KEY)
    except sqlite3.Error:
        logger.exception("Failed to load dashboard from %s", path)
        return None
    if blob is None:
        return None
    try:
        data = json.loads(blob)
        DashboardData.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Ignoring stored dashboard with an incompatible schema: %s", exc)
        return None
    return data


def clear_dashboard(path: Path) -> bool:
    path = Path(path)
    if not path.exists():
        return False
    try:
        with database_connection(path) as conn:
            return delete_blob(conn, STORAGE_KEY)
    except sqlite3.Error as exc:
        logger.error("Failed to clear dashboard in %s: %s", path, exc)
        raise StorageError(f"Failed to clear data in {path}: {exc}") from exc


def has_dashboard(path: Path) -> bool:
    """True only when a dashboard that :func:`load_dashboard` accepts is stored."""
    return load_dashboard(path) is not None

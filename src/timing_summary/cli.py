"""Command-line interface for the Timing export summarizer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from .config import AggregatorSettings
from .db import clear_dashboard, load_dashboard, save_dashboard
from .errors import StorageError, TimingSummaryError
from .exporter import read_tables, write_tables
from .filters import TimeRange
from .loader import load_activities
from .paths import get_db_path, get_output_dir

app = typer.Typer(help="Pre-aggregate a Timing activity export for dashboards.")

logger = logging.getLogger(__name__)


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def preprocess(
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help='Path to the "All Activities.json" export.',
    ),
    out_dir: Optional[Path] = typer.Option(
        None,
        "--out",
        path_type=Path,
        help="Directory for the generated JSON tables.",
    ),
    owner_label: Optional[str] = typer.Option(
        None,
        "--owner",
        help="Label used for every MacBook device.",
    ),
    strict_dates: bool = typer.Option(
        False,
        "--strict-dates",
        help="Abort when a record has an unparseable startDate instead of skipping it.",
    ),
    store: bool = typer.Option(
        True,
        "--store/--no-store",
        help="Also cache the result in the local summary store.",
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the summary cache database."
    ),
    devices: Optional[List[str]] = typer.Option(
        None,
        "--device",
        help="Only include this normalized device (repeatable).",
    ),
    time_range: TimeRange = typer.Option(
        TimeRange.ALL, "--range", help="Only include activities in this window."
    ),
) -> None:
    """Aggregate an export into daily, app, device, hourly and monthly tables."""
    from .driver import aggregate
    from .filters import filtered_dashboard
    from .reporting import SummaryPrinter

    settings = AggregatorSettings.from_options(
        owner_label=owner_label, strict_dates=strict_dates
    )
    try:
        records = load_activities(input_path)
        if devices or time_range is not TimeRange.ALL:
            data = filtered_dashboard(
                records, devices=devices or None, time_range=time_range, settings=settings
            )
        else:
            data = aggregate(records, settings)
    except TimingSummaryError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    write_tables(data, out_dir or get_output_dir())

    if store:
        try:
            save_dashboard(
                db_path or get_db_path(), data, max_bytes=settings.max_blob_bytes
            )
        except StorageError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc

    SummaryPrinter(data).print_overview()


@app.command()
def summary(
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the summary cache database."
    ),
    from_dir: Optional[Path] = typer.Option(
        None,
        "--dir",
        path_type=Path,
        help="Read exported tables from this directory instead of the cache.",
    ),
) -> None:
    """Print a high-level summary of the last processed export."""
    from .reporting import SummaryPrinter

    if from_dir is not None:
        data = read_tables(from_dir)
    else:
        data = load_dashboard(db_path or get_db_path())
    if data is None:
        typer.echo("No processed data found. Run 'preprocess' first.")
        raise typer.Exit(code=1)

    printer = SummaryPrinter(data)
    printer.print_overview()
    printer.print_top_apps()
    printer.print_devices()
    printer.print_busiest_hours()


@app.command()
def clear(
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the summary cache database."
    ),
) -> None:
    """Remove the cached dashboard."""
    try:
        removed = clear_dashboard(db_path or get_db_path())
    except StorageError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo("Cleared stored dashboard." if removed else "Nothing stored.")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the summary cache database."
    ),
    chunk_size: int = typer.Option(
        50_000,
        "--chunk-size",
        min=1,
        help="Records ingested between yields to the event loop.",
    ),
    owner_label: Optional[str] = typer.Option(
        None,
        "--owner",
        help="Label used for every MacBook device in uploads.",
    ),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically open the API docs in your default browser.",
    ),
) -> None:
    """Serve the upload and dashboard API."""
    from .server_runner import run_dashboard

    run_dashboard(
        host=host,
        port=port,
        db_path=db_path or get_db_path(),
        settings=AggregatorSettings.from_options(
            chunk_size=chunk_size, owner_label=owner_label
        ),
        open_browser=open_browser,
    )

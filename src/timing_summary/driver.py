"""Drive the aggregator over a full export, in one pass or in slices."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Sequence

from .config import AggregatorSettings
from .engine import Aggregator
from .summary import materialize

logger = logging.getLogger(__name__)

PHASE_PROCESSING = "Processing records"
PHASE_SUMMARIZING = "Generating summaries"
PHASE_COMPLETE = "Complete"

ProgressCallback = Callable[[str, int, int], None]


@dataclass(slots=True, frozen=True)
class Progress:
    phase: str
    current: int
    total: int


def aggregate(
    records: Sequence[Mapping[str, Any]],
    settings: Optional[AggregatorSettings] = None,
) -> Dict[str, Any]:
    """Batch path: aggregate every record in one unbroken pass."""
    aggregator = Aggregator(settings)
    log_every = aggregator.settings.log_every
    started = time.perf_counter()
    for index, record in enumerate(records):
        aggregator.ingest(record)
        if index > 0 and log_every and index % log_every == 0:
            logger.info("Processed %s records...", f"{index:,}")
    state = aggregator.finish()
    logger.info(
        "Processed %s records in %.1fs",
        f"{state.total_records:,}",
        time.perf_counter() - started,
    )
    return materialize(state)


def iter_chunks(
    records: Sequence[Mapping[str, Any]],
    aggregator: Aggregator,
    chunk_size: Optional[int] = None,
) -> Iterator[Progress]:
    """Ingest ``records`` slice by slice, yielding progress after each slice.

    The consumer decides what happens between slices. The aggregator's
    state is identical to a single pass no matter where the slices fall.
    """
    size = max(chunk_size or aggregator.settings.chunk_size, 1)
    total = len(records)
    processed = 0
    while processed < total:
        chunk = records[processed : processed + size]
        for record in chunk:
            aggregator.ingest(record)
        processed += len(chunk)
        yield Progress(PHASE_PROCESSING, processed, total)


async def aggregate_async(
    records: Sequence[Mapping[str, Any]],
    settings: Optional[AggregatorSettings] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> Dict[str, Any]:
    """Interactive path: hand control back to the event loop between slices."""
    aggregator = Aggregator(settings)
    for progress in iter_chunks(records, aggregator):
        if on_progress:
            on_progress(progress.phase, progress.current, progress.total)
        await asyncio.sleep(0)

    if on_progress:
        on_progress(PHASE_SUMMARIZING, 0, 1)
    data = materialize(aggregator.finish())
    if on_progress:
        on_progress(PHASE_COMPLETE, 1, 1)
    return data

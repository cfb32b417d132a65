"""Configuration models and helpers for the summarizer."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MACBOOK_LABEL = "Benjamin's MacBook Pro"


@dataclass(slots=True)
class AggregatorSettings:
    """Runtime configuration for an aggregation run."""

    chunk_size: int = 50_000
    log_every: int = 200_000
    macbook_label: str = DEFAULT_MACBOOK_LABEL
    strict_dates: bool = False
    max_blob_bytes: int = 5 * 1024 * 1024

    @classmethod
    def from_options(
        cls,
        chunk_size: int | None = None,
        owner_label: str | None = None,
        strict_dates: bool = False,
    ) -> "AggregatorSettings":
        settings = cls(strict_dates=strict_dates)
        if chunk_size is not None:
            settings.chunk_size = max(int(chunk_size), 1)
        if owner_label:
            settings.macbook_label = owner_label.strip() or DEFAULT_MACBOOK_LABEL
        return settings

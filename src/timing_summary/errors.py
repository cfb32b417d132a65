"""Exception types surfaced to callers of the summarizer."""

from __future__ import annotations

from enum import Enum


class TimingSummaryError(Exception):
    """Base class for failures that stop an aggregation run."""


class InputProblem(str, Enum):
    NOT_JSON = "not_json"
    NOT_ARRAY = "not_array"
    EMPTY = "empty"
    MISSING_FIELDS = "missing_fields"


class InputValidationError(TimingSummaryError, ValueError):
    """The export is structurally unusable; raised before ingestion starts."""

    def __init__(self, reason: InputProblem, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class InvalidTimestampError(TimingSummaryError, ValueError):
    """A record's start date could not be parsed while strict dates are on."""

    def __init__(self, value: object, index: int) -> None:
        super().__init__(f"Unparseable startDate {value!r} in record #{index}")
        self.value = value
        self.index = index


class StorageError(TimingSummaryError):
    """The summary could not be written to the blob store."""


class BlobTooLargeError(StorageError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Failed to save data. The processed data ({size} bytes) exceeds "
            f"the store limit of {limit} bytes."
        )
        self.size = size
        self.limit = limit

# -*- coding: utf-8 -*-
"""Error taxonomy for meal entry, estimation and storage."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class CalorieTrackError(Exception):
    """Base class for errors raised by the tracker services.

    Attributes:
        message: human-readable message, shown inline next to the form
        details: optional mapping with extra context (e.g. ``itemIndex``)
        http_status: suggested HTTP status for API handlers
    """

    http_status = 500

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else None

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.details:
            payload.update(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ValidationError(CalorieTrackError):
    """Bad or missing user input, detected before any estimator call."""

    http_status = 400


class EstimationError(CalorieTrackError):
    """The estimator is unavailable, returned an error or returned malformed data."""

    http_status = 502

    def __init__(self, message: str, item_index: Optional[int] = None):
        details = {"itemIndex": item_index} if item_index is not None else None
        super().__init__(message, details)
        self.item_index = item_index


class StorageCorruption(CalorieTrackError):
    """Persisted ledger data could not be read. Never surfaced to callers."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt data under {key!r}: {reason}", {"key": key})
        self.key = key
        self.reason = reason

# -*- coding: utf-8 -*-
"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException

from .config import settings
from .errors import CalorieTrackError
from .estimator import NutritionEstimator, resolve_estimator
from .store import KeyValueStore, SqliteStore

_store_instance: Optional[SqliteStore] = None


def get_store() -> KeyValueStore:
    """Get or create the SQLite store at the configured path."""
    global _store_instance
    if _store_instance is None:
        _store_instance = SqliteStore(settings.db_path)
    return _store_instance


def get_estimator() -> Optional[NutritionEstimator]:
    return resolve_estimator()


def http_error(exc: CalorieTrackError) -> HTTPException:
    return HTTPException(status_code=exc.http_status, detail=exc.to_dict())

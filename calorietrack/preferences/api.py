# -*- coding: utf-8 -*-
"""Preferences — API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_estimator, get_store, http_error
from ..errors import ValidationError
from ..estimator import NutritionEstimator
from ..store import KeyValueStore
from .models import AppSettings, GoalUpdateRequest, SettingsResponse, ThemeUpdateRequest
from .storage import load_settings, set_daily_goal, set_theme, toggle_theme

router = APIRouter(prefix="/api/settings", tags=["Settings"])

ESTIMATOR_MISSING_NOTICE = (
    "API key not configured. Calorie auto-calculation is disabled. Please enter all calories manually."
)


def _response(current: AppSettings, estimator: Optional[NutritionEstimator]) -> SettingsResponse:
    available = estimator is not None
    return SettingsResponse(
        daily_goal=current.daily_goal,
        theme=current.theme,
        estimator_available=available,
        notice=None if available else ESTIMATOR_MISSING_NOTICE,
    )


@router.get("", response_model=SettingsResponse, summary="Current settings")
def get_settings(
    store: KeyValueStore = Depends(get_store),
    estimator: Optional[NutritionEstimator] = Depends(get_estimator),
):
    return _response(load_settings(store), estimator)


@router.put("/goal", response_model=SettingsResponse, summary="Set the daily calorie goal")
def update_goal(
    request: GoalUpdateRequest,
    store: KeyValueStore = Depends(get_store),
    estimator: Optional[NutritionEstimator] = Depends(get_estimator),
):
    try:
        current = set_daily_goal(store, request.daily_goal)
    except ValidationError as exc:
        raise http_error(exc) from exc
    return _response(current, estimator)


@router.put("/theme", response_model=SettingsResponse, summary="Set the theme")
def update_theme(
    request: ThemeUpdateRequest,
    store: KeyValueStore = Depends(get_store),
    estimator: Optional[NutritionEstimator] = Depends(get_estimator),
):
    try:
        current = set_theme(store, request.theme)
    except ValidationError as exc:
        raise http_error(exc) from exc
    return _response(current, estimator)


@router.post("/theme/toggle", response_model=SettingsResponse, summary="Switch between light and dark")
def toggle(
    store: KeyValueStore = Depends(get_store),
    estimator: Optional[NutritionEstimator] = Depends(get_estimator),
):
    return _response(toggle_theme(store), estimator)

# -*- coding: utf-8 -*-
"""Meals — API endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_estimator, get_store, http_error
from ..errors import CalorieTrackError
from ..estimator import NutritionEstimator
from ..preferences.storage import load_settings
from ..store import KeyValueStore
from .aggregator import build_meal
from .ledger import DailyLedger, parse_date_key
from .models import DailyProgress, LedgerResponse, Meal, MealCreateRequest, MealCreateResponse
from .progress import compute_progress

router = APIRouter(prefix="/api/meals", tags=["Meals"])


def _ledger_or_400(store: KeyValueStore, day: str) -> DailyLedger:
    try:
        return DailyLedger(store, parse_date_key(day))
    except CalorieTrackError as exc:
        raise http_error(exc) from exc


def _ledger_response(store: KeyValueStore, day: str, meals: List[Meal]) -> LedgerResponse:
    goal = load_settings(store).daily_goal
    return LedgerResponse(date=day, meals=meals, progress=compute_progress(meals, goal))


@router.get("/{day}", response_model=LedgerResponse, response_model_exclude_none=True, summary="Meals and progress for a date")
def get_ledger(day: str, store: KeyValueStore = Depends(get_store)):
    ledger = _ledger_or_400(store, day)
    return _ledger_response(store, ledger.date or day, ledger.meals)


@router.get("/{day}/progress", response_model=DailyProgress, summary="Calorie progress for a date")
def get_progress(day: str, store: KeyValueStore = Depends(get_store)):
    ledger = _ledger_or_400(store, day)
    return compute_progress(ledger.meals, load_settings(store).daily_goal)


@router.post(
    "/{day}",
    response_model=MealCreateResponse,
    response_model_exclude_none=True,
    status_code=201,
    summary="Submit the meal entry form",
)
async def create_meal(
    day: str,
    request: MealCreateRequest,
    store: KeyValueStore = Depends(get_store),
    estimator: Optional[NutritionEstimator] = Depends(get_estimator),
):
    try:
        day = parse_date_key(day)
        meal = await build_meal(request.meal_time, request.items, day=day, estimator=estimator)
    except CalorieTrackError as exc:
        raise http_error(exc) from exc

    # Load after estimation so no await separates the read from the write.
    ledger = DailyLedger(store, day)
    meals = ledger.add(meal)
    return MealCreateResponse(meal=meal, ledger=_ledger_response(store, day, meals))


@router.delete("/{day}/{meal_id}", response_model=LedgerResponse, response_model_exclude_none=True, summary="Delete a meal")
def delete_meal(day: str, meal_id: str, store: KeyValueStore = Depends(get_store)):
    ledger = _ledger_or_400(store, day)
    meals = ledger.remove(meal_id)
    return _ledger_response(store, day, meals)

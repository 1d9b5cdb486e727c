# -*- coding: utf-8 -*-
"""Daily ledger — the ordered meal list of one active date, synchronized to the store."""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import date as date_cls
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import StorageCorruption, ValidationError
from ..store import KeyValueStore
from .models import Meal, meal_time_rank

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_LEDGER_ADAPTER = TypeAdapter(List[Meal])


def meals_key(day: str) -> str:
    return f"meals.{day}"


def today_key() -> str:
    return date_cls.today().isoformat()


def parse_date_key(value: str) -> str:
    """Return ``value`` if it is a real ``YYYY-MM-DD`` calendar date."""
    value = (value or "").strip()
    if not _DATE_RE.match(value):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD.")
    try:
        date_cls.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid date {value!r}: {exc}") from exc
    return value


def _item_amount(item: object, field: str) -> float:
    value = item.get(field) if isinstance(item, dict) else None
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return value
    return 0


def _with_item_totals(element: Dict[str, Any]) -> Dict[str, Any]:
    """Derive the meal totals from its items; stored totals are not trusted."""
    items = element["items"]
    repaired = dict(element)
    repaired["totalCalories"] = sum(_item_amount(item, "calories") for item in items)
    for field, total_field in (("protein", "totalProtein"), ("carbs", "totalCarbs"), ("fat", "totalFat")):
        total = sum(_item_amount(item, field) for item in items)
        if total > 0:
            repaired[total_field] = total
        else:
            repaired.pop(total_field, None)
    return repaired


def parse_ledger(key: str, raw: str) -> List[Meal]:
    """Validate a stored ledger value.

    Returns the typed meal list, or raises StorageCorruption when the value is
    not JSON, not a list, an element has no ``id`` or ``items`` list, or an
    element still fails the Meal schema once its totals are recomputed.
    """
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StorageCorruption(key, f"invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise StorageCorruption(key, f"expected a list, got {type(data).__name__}")
    for position, element in enumerate(data):
        if not isinstance(element, dict) or "id" not in element or not isinstance(element.get("items"), list):
            raise StorageCorruption(key, f"element {position} has no id or items list")
    try:
        meals = _LEDGER_ADAPTER.validate_python([_with_item_totals(element) for element in data])
    except PydanticValidationError as exc:
        raise StorageCorruption(key, f"schema mismatch: {exc.error_count()} error(s)") from exc
    ids = [meal.id for meal in meals]
    if len(set(ids)) != len(ids):
        raise StorageCorruption(key, "duplicate meal ids")
    return meals


def serialize_ledger(meals: List[Meal]) -> str:
    return json.dumps([meal.to_json_dict() for meal in meals], ensure_ascii=False)


class DailyLedger:
    """Holds the meals of exactly one active date.

    Every mutation writes the whole list for the date as a single store value.
    """

    def __init__(self, store: KeyValueStore, day: Optional[str] = None) -> None:
        self.store = store
        self.date: Optional[str] = None
        self._meals: List[Meal] = []
        if day is not None:
            self.load(day)

    @property
    def meals(self) -> List[Meal]:
        return list(self._meals)

    def __len__(self) -> int:
        return len(self._meals)

    def __contains__(self, meal_id: object) -> bool:
        return any(meal.id == meal_id for meal in self._meals)

    def load(self, day: str) -> List[Meal]:
        self.date = parse_date_key(day)
        key = meals_key(self.date)
        raw = self.store.get(key)
        if not raw:
            self._meals = []
            return self.meals
        try:
            self._meals = parse_ledger(key, raw)
        except StorageCorruption as exc:
            logger.warning("resetting corrupt ledger %s: %s", key, exc.reason)
            self._meals = []
            self.store.delete(key)
        return self.meals

    def add(self, meal: Meal) -> List[Meal]:
        self._require_date()
        if meal.date != self.date:
            raise ValueError(f"meal dated {meal.date} cannot be added to the {self.date} ledger")
        if meal.id in self:
            raise ValueError(f"meal {meal.id} already exists on {self.date}")
        # sorted() is stable: same-category meals keep their insertion order.
        self._meals = sorted([*self._meals, meal], key=lambda m: meal_time_rank(m.meal_time))
        self._persist()
        logger.info("added %s meal %s on %s (%s kcal)", meal.meal_time.value, meal.id, self.date, meal.total_calories)
        return self.meals

    def remove(self, meal_id: str) -> List[Meal]:
        self._require_date()
        before = len(self._meals)
        self._meals = [meal for meal in self._meals if meal.id != meal_id]
        self._persist()
        if len(self._meals) != before:
            logger.info("removed meal %s on %s", meal_id, self.date)
        return self.meals

    def _require_date(self) -> None:
        if self.date is None:
            raise RuntimeError("no active date; call load() first")

    def _persist(self) -> None:
        self.store.set(meals_key(self.date or ""), serialize_ledger(self._meals))

# -*- coding: utf-8 -*-
"""Meal aggregation — turns the meal entry form into a finalized Meal.

Items are validated and priced in form order. Items without a manual calorie
value are sent to the nutrition estimator one at a time; the first failure
aborts the whole submission, so a Meal is only returned when every item
succeeded.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from ..errors import EstimationError, ValidationError
from ..estimator import NutritionEstimator
from .models import DraftFoodItem, FoodItemEntry, Meal, MealTime

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def new_meal_id() -> str:
    return f"meal_{uuid4().hex}"


def new_food_id() -> str:
    return f"food_{uuid4().hex}"


def parse_manual_calories(raw: str) -> Optional[int]:
    """Leading-integer parse of a calorie field ("250", "250 kcal", "250.5" -> 250)."""
    m = _LEADING_INT_RE.match(raw.strip())
    if not m:
        return None
    return int(m.group(0))


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _optional_amount(value: object) -> Optional[float]:
    if _is_number(value) and value >= 0:  # type: ignore[operator]
        return value  # type: ignore[return-value]
    return None


def _positive_or_none(total: float) -> Optional[float]:
    return total if total > 0 else None


def assemble_meal(meal_time: MealTime, day: str, items: Sequence[Dict[str, Any]]) -> Meal:
    """Assign ids and compute totals for already-priced items."""
    entries = [FoodItemEntry(id=new_food_id(), **item) for item in items]
    total_protein = sum(e.protein or 0 for e in entries)
    total_carbs = sum(e.carbs or 0 for e in entries)
    total_fat = sum(e.fat or 0 for e in entries)
    return Meal(
        id=new_meal_id(),
        date=day,
        meal_time=meal_time,
        items=entries,
        total_calories=sum(e.calories for e in entries),
        total_protein=_positive_or_none(total_protein),
        total_carbs=_positive_or_none(total_carbs),
        total_fat=_positive_or_none(total_fat),
    )


class MealSubmission:
    """One submission of the meal entry form.

    ``cancel()`` marks the submission as abandoned (the form was closed). The
    estimator is not told; a result arriving afterwards is discarded and
    ``run()`` resolves to None.
    """

    def __init__(
        self,
        *,
        meal_time: MealTime,
        drafts: Sequence[DraftFoodItem],
        day: str,
        estimator: Optional[NutritionEstimator],
    ) -> None:
        self.meal_time = meal_time
        self.drafts = list(drafts)
        self.day = day
        self.estimator = estimator
        self._cancelled = False

    @property
    def is_current(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    async def run(self) -> Optional[Meal]:
        if not self.drafts:
            raise ValidationError("No valid food items to add. Please add at least one food item.")

        processed: List[Dict[str, Any]] = []
        for index, draft in enumerate(self.drafts):
            if not self.is_current:
                return None
            item = await self._price_item(index, draft)
            if not self.is_current:
                logger.info("discarding estimate for abandoned %s submission", self.meal_time.value)
                return None
            processed.append(item)

        return assemble_meal(self.meal_time, self.day, processed)

    async def _price_item(self, index: int, draft: DraftFoodItem) -> Dict[str, Any]:
        food_name = (draft.food_name or "").strip()
        if not food_name:
            raise ValidationError(
                f"Food item name for entry #{index + 1} cannot be empty.", {"itemIndex": index}
            )
        quantity = (draft.quantity or "").strip() or None
        manual_raw = (draft.manual_calories or "").strip()

        if manual_raw:
            calories = parse_manual_calories(manual_raw)
            if calories is None or calories <= 0:
                raise ValidationError(
                    f'Manual calories for "{food_name}" must be a positive number.', {"itemIndex": index}
                )
            return {"food_name": food_name, "quantity": quantity, "calories": calories}

        if self.estimator is None:
            raise ValidationError(
                f'API not available for "{food_name}". Please enter calories manually or configure API key.',
                {"itemIndex": index},
            )
        if not quantity:
            raise ValidationError(
                f'Quantity for "{food_name}" is required for auto-calculation, or enter calories manually.',
                {"itemIndex": index},
            )

        data = await self.estimator.estimate(food_name, quantity)
        if not isinstance(data, dict):
            raise EstimationError(f'Could not fetch data for "{food_name}".', item_index=index)
        if data.get("error"):
            raise EstimationError(f'Error for "{food_name}": {data["error"]}', item_index=index)
        if not _is_number(data.get("calories")) or data["calories"] < 0:
            raise EstimationError(f'Could not fetch data for "{food_name}".', item_index=index)

        return {
            "food_name": food_name,
            "quantity": quantity,
            "calories": data["calories"],
            "protein": _optional_amount(data.get("protein")),
            "carbs": _optional_amount(data.get("carbs")),
            "fat": _optional_amount(data.get("fat")),
        }


async def build_meal(
    meal_time: MealTime,
    drafts: Sequence[DraftFoodItem],
    *,
    day: str,
    estimator: Optional[NutritionEstimator],
) -> Meal:
    """Run a submission to completion; it cannot be cancelled from here."""
    meal = await MealSubmission(meal_time=meal_time, drafts=drafts, day=day, estimator=estimator).run()
    if meal is None:
        raise RuntimeError(f"{meal_time.value} submission for {day} was abandoned")
    return meal

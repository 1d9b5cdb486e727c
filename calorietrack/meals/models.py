# -*- coding: utf-8 -*-
"""Meals — Pydantic models.

Stored and API JSON use camelCase keys (``foodName``, ``mealTime``,
``totalCalories``); attributes are snake_case.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    field_validator,
    model_validator,
)

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

# Manual entries are whole kcal; estimator values may be fractional.
Amount = Union[NonNegativeInt, Annotated[float, Field(ge=0, allow_inf_nan=False)]]


class MealTime(str, Enum):
    breakfast = "Breakfast"
    lunch = "Lunch"
    dinner = "Dinner"
    snack = "Snack"


MEAL_TIME_ORDER: List[MealTime] = [MealTime.breakfast, MealTime.lunch, MealTime.dinner, MealTime.snack]


def meal_time_rank(meal_time: MealTime) -> int:
    return MEAL_TIME_ORDER.index(meal_time)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FoodItemEntry(_CamelModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    food_name: str = Field(..., min_length=1, alias="foodName")
    quantity: Optional[str] = None
    calories: Amount
    protein: Optional[Amount] = None
    carbs: Optional[Amount] = None
    fat: Optional[Amount] = None
    api_error: Optional[str] = Field(None, alias="apiError")


class Meal(_CamelModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    date: str = Field(..., pattern=DATE_PATTERN)
    meal_time: MealTime = Field(..., alias="mealTime")
    items: List[FoodItemEntry]
    total_calories: Amount = Field(..., alias="totalCalories")
    total_protein: Optional[Amount] = Field(None, alias="totalProtein")
    total_carbs: Optional[Amount] = Field(None, alias="totalCarbs")
    total_fat: Optional[Amount] = Field(None, alias="totalFat")

    @model_validator(mode="after")
    def _check_items(self) -> "Meal":
        ids = [item.id for item in self.items]
        if len(set(ids)) != len(ids):
            raise ValueError("food item ids must be unique within a meal")
        if self.total_calories != sum(item.calories for item in self.items):
            raise ValueError("totalCalories does not match the sum of item calories")
        return self

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DraftFoodItem(_CamelModel):
    """One row of the meal entry form, before validation."""

    food_name: str = Field("", alias="foodName")
    quantity: Optional[str] = None
    manual_calories: Optional[str] = Field(
        None, alias="manualCalories", description="Overrides auto-calculation when non-empty"
    )

    @field_validator("manual_calories", mode="before")
    @classmethod
    def _coerce_manual_calories(cls, value: object) -> Optional[str]:
        # Number inputs may arrive as JSON numbers; keep the raw text for parsing.
        if value is None:
            return None
        if isinstance(value, bool):
            return str(value)
        if isinstance(value, (int, float)):
            return str(value)
        return value  # type: ignore[return-value]


class MealCreateRequest(_CamelModel):
    meal_time: MealTime = Field(MealTime.breakfast, alias="mealTime")
    items: List[DraftFoodItem] = Field(default_factory=list)


class DailyProgress(_CamelModel):
    goal: int
    consumed: float = Field(..., ge=0)
    remaining: float
    remaining_abs: float = Field(..., ge=0, alias="remainingAbs")
    percentage: float = Field(..., ge=0, description="Raw percentage, not capped at 100")
    bar_width: float = Field(..., ge=0, le=100, alias="barWidth")
    status: str = Field(..., description="ok | warning | danger")
    is_over: bool = Field(..., alias="isOver")
    label: str


class LedgerResponse(_CamelModel):
    date: str
    meals: List[Meal]
    progress: DailyProgress


class MealCreateResponse(_CamelModel):
    meal: Meal
    ledger: LedgerResponse

# -*- coding: utf-8 -*-
"""Daily progress against the calorie goal."""

from __future__ import annotations

from typing import Iterable

from .models import DailyProgress, Meal

WARNING_THRESHOLD = 85.0
DANGER_THRESHOLD = 100.0


def consumed_calories(meals: Iterable[Meal]) -> float:
    return sum(meal.total_calories for meal in meals)


def progress_percentage(consumed: float, goal: int) -> float:
    if goal <= 0:
        return 0
    return max(0.0, consumed / goal * 100)


def bar_width(percentage: float) -> float:
    """Width of the progress bar; the only place the percentage is capped."""
    return max(0.0, min(100.0, percentage))


def progress_status(percentage: float) -> str:
    # Thresholds read the raw percentage, so 120% is "danger" even though the bar is full.
    if percentage > DANGER_THRESHOLD:
        return "danger"
    if percentage > WARNING_THRESHOLD:
        return "warning"
    return "ok"


def compute_progress(meals: Iterable[Meal], goal: int) -> DailyProgress:
    consumed = consumed_calories(meals)
    remaining = goal - consumed
    percentage = progress_percentage(consumed, goal)
    return DailyProgress(
        goal=goal,
        consumed=consumed,
        remaining=remaining,
        remaining_abs=abs(remaining),
        percentage=percentage,
        bar_width=bar_width(percentage),
        status=progress_status(percentage),
        is_over=remaining < 0,
        label="Calories Remaining" if remaining >= 0 else "Calories Over",
    )
